"""
Sound and "haptic" feedback for the Memory Match Game (ID: 1001).

Discord has no haptics, so a reaction on the board message stands in for them.
Sounds are uploaded as short audio attachments when the asset exists.
"""
import asyncio
import logging
import os
import traceback

import discord

from common.config import (
    SOUNDS_ENABLED, SOUND_DIR, SUCCESS_SOUND, FAILURE_SOUND, WELCOME_SOUND, WELCOME_SOUND_FLAG
)
from common.database import database
from games.game_1001_matching.game_1001 import FeedbackHooks

logger = logging.getLogger("discord_bot")

HAPTIC_REACTIONS = {
    "success": "✅",
    "error": "❌",
}


class DiscordFeedback(FeedbackHooks):
    """Feedback hooks that post to a Discord channel."""
    def __init__(self, channel, sound_dir=SOUND_DIR, sounds_enabled=SOUNDS_ENABLED):
        self.channel = channel
        self.sound_dir = sound_dir
        self.sounds_enabled = sounds_enabled
        self.board_message = None  # Set by the view once the board is posted
        self._tasks = set()

    def _spawn(self, coro):
        # Engine hooks are synchronous; the Discord calls run as tasks on the bot loop
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def play_success_cue(self):
        self._spawn(self.play_sound(SUCCESS_SOUND))

    def play_failure_cue(self):
        self._spawn(self.play_sound(FAILURE_SOUND))

    def trigger_haptic(self, kind):
        emoji = HAPTIC_REACTIONS.get(kind)
        if emoji is None:
            logger.warning(f"Unknown haptic kind: {kind}")
            return
        self._spawn(self.add_reaction(emoji))

    def sound_path(self, filename):
        return os.path.join(self.sound_dir, filename)

    async def play_sound(self, filename):
        """Upload a sound file to the channel. Missing assets are skipped."""
        if not self.sounds_enabled:
            return False

        path = self.sound_path(filename)
        if not os.path.isfile(path):
            logger.warning(f"Sound asset not found, skipping playback: {path}")
            return False

        try:
            await self.channel.send(file=discord.File(path, filename=filename))
            return True
        except discord.HTTPException as e:
            logger.error(f"Error sending sound {filename}: {e}")
            return False

    async def add_reaction(self, emoji):
        if not self.board_message:
            return False
        try:
            # Re-adding a reaction the bot already has is a no-op, so take ours off first
            await self.board_message.remove_reaction(emoji, self.board_message.author)
            await self.board_message.add_reaction(emoji)
            return True
        except discord.NotFound:
            logger.warning("Board message not found while adding feedback reaction")
        except discord.HTTPException as e:
            logger.error(f"Error adding feedback reaction: {e}")
        return False

    async def play_welcome_cue(self):
        """Play the welcome sound the first time any game starts."""
        try:
            if database["get_flag"](WELCOME_SOUND_FLAG):
                return False

            played = await self.play_sound(WELCOME_SOUND)
            # Remember it either way so a missing asset doesn't retry forever
            database["set_flag"](WELCOME_SOUND_FLAG, True)
            return played
        except Exception as e:
            logger.error(f"Error playing welcome cue: {e}\n{traceback.format_exc()}")
            return False

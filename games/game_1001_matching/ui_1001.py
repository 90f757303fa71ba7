"""
UI components for the Discord Memory Match Game (ID: 1001).
"""
import discord
import logging
import traceback
import time
import asyncio

from games.game_1001_matching.game_1001 import (
    GAME_ID, Difficulty, EVENT_MATCH, EVENT_MISMATCH, EVENT_COMPLETE
)

logger = logging.getLogger("discord_bot")

CARDS_PER_ROW = 5
CONTROL_ROW = 4  # Discord allows 5 rows; hard mode uses the first 4 for cards

STATUS_MESSAGES = {
    EVENT_MATCH: "🎯 **Match!** Keep going.",
    EVENT_MISMATCH: "🔄 **No match.** The cards are face down again.",
    EVENT_COMPLETE: "🏆 **Board cleared!** Press Play Again for a new deck.",
}


def create_board_embed(snapshot, owner, status_message=None):
    """Build the embed shown above the card buttons."""
    color = discord.Color.green() if snapshot.is_complete else discord.Color.blue()
    embed = discord.Embed(
        title=f"Memory Match - {snapshot.difficulty.label}",
        description=status_message or "Flip two cards to find a pair.",
        color=color
    )
    embed.add_field(name="Score", value=str(snapshot.score), inline=True)
    embed.add_field(name="Pairs", value=f"{snapshot.matched_pairs}/{snapshot.total_pairs}", inline=True)
    embed.add_field(name="Player", value=owner.display_name, inline=True)
    embed.set_footer(text=f"Game ID: {GAME_ID}")
    return embed


class CardButton(discord.ui.Button):
    """A button representing one card."""
    def __init__(self, card, position, locked=False):
        if card.is_matched:
            style = discord.ButtonStyle.success
        elif card.is_face_up:
            style = discord.ButtonStyle.primary
        else:
            style = discord.ButtonStyle.secondary

        super().__init__(
            style=style,
            emoji=card.display,
            disabled=card.is_matched or locked,
            row=position // CARDS_PER_ROW
        )
        self.card_id = card.id
        self.position = position

    async def callback(self, interaction):
        view = self.view
        try:
            if not view.game.flip(self.card_id):
                # Ignored flips are silent
                await interaction.response.defer()
                return

            view.last_activity_time = time.time()
            view.status_message = None
            view.rebuild()
            await interaction.response.edit_message(embed=view.build_embed(), view=view)

        except discord.errors.NotFound:
            logger.warning(f"Interaction or message not found during CardButton callback. User: {interaction.user.id}")
        except Exception as e:
            logger.error(f"Error in card button callback: {e}\n{traceback.format_exc()}")
            if not interaction.response.is_done():
                await interaction.response.send_message(
                    f"Error processing button: {type(e).__name__}. Please try again.",
                    ephemeral=True
                )


class RestartButton(discord.ui.Button):
    """Deals a new deck at the current difficulty."""
    def __init__(self, finished=False):
        super().__init__(
            style=discord.ButtonStyle.success if finished else discord.ButtonStyle.danger,
            label="Play Again" if finished else "Restart",
            emoji="🔄",
            row=CONTROL_ROW
        )

    async def callback(self, interaction):
        view = self.view
        view.game.reset()
        await view.respond_after_reset(interaction, "New deck dealt. Good luck!")


class DifficultyButton(discord.ui.Button):
    """Deals a new deck at another difficulty."""
    def __init__(self, difficulty, current):
        super().__init__(
            style=discord.ButtonStyle.primary if difficulty == current else discord.ButtonStyle.secondary,
            label=difficulty.label,
            row=CONTROL_ROW
        )
        self.difficulty = difficulty

    async def callback(self, interaction):
        view = self.view
        view.game.reset(self.difficulty)
        await view.respond_after_reset(
            interaction,
            f"Difficulty set to **{self.difficulty.label}** ({self.difficulty.pair_count} pairs)."
        )


class GameView(discord.ui.View):
    """A running single-player game: the engine, its owner and the board message."""
    def __init__(self, game, owner, channel, feedback=None):
        super().__init__(timeout=None)  # Inactive games are cleaned up by the AFK checker
        self.game = game
        self.owner = owner
        self.channel = channel
        self.feedback = feedback
        self.message = None
        self.status_message = None
        self.last_activity_time = time.time()
        self._refresh_tasks = set()

        self._unsubscribe = game.subscribe(self.on_game_event)
        self.rebuild()

    def rebuild(self):
        """Recreate all buttons from the current game state."""
        self.clear_items()
        snapshot = self.game.snapshot()

        for position, card in enumerate(snapshot.cards):
            self.add_item(CardButton(card, position, locked=snapshot.is_locked))

        self.add_item(RestartButton(finished=snapshot.is_complete))
        for difficulty in Difficulty:
            self.add_item(DifficultyButton(difficulty, snapshot.difficulty))

    def build_embed(self):
        return create_board_embed(self.game.snapshot(), self.owner, self.status_message)

    async def send_initial_message(self, channel=None):
        """Post the board and remember the message."""
        channel = channel or self.channel
        try:
            self.message = await channel.send(embed=self.build_embed(), view=self)
            if self.feedback is not None:
                self.feedback.board_message = self.message
            logger.info(f"Memory Match board sent in channel {channel.id}")
            return self.message
        except Exception as e:
            logger.error(f"Error sending initial board: {e}\n{traceback.format_exc()}")
            raise

    async def respond_after_reset(self, interaction, status_message):
        try:
            self.last_activity_time = time.time()
            self.status_message = status_message
            self.rebuild()
            await interaction.response.edit_message(embed=self.build_embed(), view=self)
        except discord.errors.NotFound:
            logger.warning(f"Interaction or message not found while restarting. User: {interaction.user.id}")
        except Exception as e:
            logger.error(f"Error refreshing board after reset: {e}\n{traceback.format_exc()}")

    async def refresh(self, status_message=None):
        """Edit the board message to match the current game state."""
        if self.is_finished():
            return
        if status_message is not None:
            self.status_message = status_message
        self.rebuild()

        if not self.message:
            return
        try:
            await self.message.edit(embed=self.build_embed(), view=self)
        except discord.NotFound:
            logger.warning("Board message not found, sending a new one")
            await self.send_initial_message()
        except Exception as e:
            logger.error(f"Error updating board message: {e}\n{traceback.format_exc()}")

    def on_game_event(self, event, snapshot):
        """Engine listener. Redraws after a pair is resolved by the timer."""
        if event not in STATUS_MESSAGES:
            return
        if event == EVENT_MATCH and snapshot.is_complete:
            return  # The complete event follows right away
        task = asyncio.create_task(self.refresh(STATUS_MESSAGES[event]))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def interaction_check(self, interaction):
        if interaction.user.id != self.owner.id:
            await interaction.response.send_message(
                "This is not your game. Start your own with `/memory_start`.",
                ephemeral=True
            )
            return False
        return True

    async def end(self, reason="Game ended."):
        """Stop the game: cancel any pending pair and freeze the board."""
        self.game.cancel_pending()
        self._unsubscribe()
        for task in self._refresh_tasks:
            task.cancel()
        self._refresh_tasks.clear()
        for item in self.children:
            item.disabled = True
        self.status_message = reason
        if self.message:
            try:
                await self.message.edit(embed=self.build_embed(), view=self)
            except discord.HTTPException as e:
                logger.error(f"Error freezing board message: {e}")
        self.stop()

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item):
        logger.error(f"Error in GameView item {item}: {error}\n{traceback.format_exc()}")
        if interaction.response.is_done():
            await interaction.followup.send(f"An error occurred with the interface: {type(error).__name__}", ephemeral=True)
        else:
            await interaction.response.send_message(f"An error occurred with the interface: {type(error).__name__}", ephemeral=True)

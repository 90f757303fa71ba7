"""
Command handlers for the Memory Match Game (ID: 1001).
"""
import discord
import logging
import time
import traceback
from discord import app_commands

from common.config import DEFAULT_DIFFICULTY, DEFAULT_SCORING_POLICY, REVEAL_DELAY_SECONDS, SOUNDS_ENABLED
from common.utils.game_utils import get_active_game, register_game, remove_game
from games.game_1001_matching.game_1001 import GAME_ID, MemoryGame, Difficulty
from games.game_1001_matching.feedback_1001 import DiscordFeedback
from games.game_1001_matching.ui_1001 import GameView

logger = logging.getLogger("discord_bot")

DIFFICULTY_CHOICES = [
    app_commands.Choice(name=f"{d.label} ({d.pair_count} pairs)", value=d.value)
    for d in Difficulty
]

def create_game_view(owner, channel, difficulty=DEFAULT_DIFFICULTY,
                     scoring_policy=DEFAULT_SCORING_POLICY, reveal_delay=REVEAL_DELAY_SECONDS,
                     sounds_enabled=SOUNDS_ENABLED):
    """Wire a new engine to its Discord feedback and view."""
    feedback = DiscordFeedback(channel, sounds_enabled=sounds_enabled)
    game = MemoryGame(
        difficulty=difficulty,
        scoring_policy=scoring_policy,
        feedback=feedback,
        reveal_delay=reveal_delay
    )
    return GameView(game, owner, channel, feedback=feedback)

def create_final_embed(game_view, reason):
    snapshot = game_view.game.snapshot()
    embed = discord.Embed(
        title="Memory Match Game Ended",
        description=f"{game_view.owner.mention}'s game has ended.",
        color=discord.Color.gold()
    )
    embed.add_field(name="Reason", value=f"• {reason}", inline=False)
    embed.add_field(name="Final Score", value=str(snapshot.score), inline=True)
    embed.add_field(name="Pairs Found", value=f"{snapshot.matched_pairs}/{snapshot.total_pairs}", inline=True)
    embed.add_field(name="Difficulty", value=snapshot.difficulty.label, inline=True)
    return embed

async def end_game_internal(channel_id, game_view, reason="Game ended."):
    """End a Memory Match game and clean up resources.

    Args:
        channel_id: ID of the channel where the game is running
        game_view: The GameView of the game
        reason: The reason the game ended
    """
    try:
        if remove_game(GAME_ID, channel_id) is None:
            return

        await game_view.end(reason)
        await game_view.channel.send(embed=create_final_embed(game_view, reason))

        logger.info(f"Memory Match game ended in channel {channel_id}: {reason}")

    except Exception as e:
        logger.error(f"Error ending Memory Match game: {e}\n{traceback.format_exc()}")

async def setup_memory_match_commands(bot, scoring_policy=DEFAULT_SCORING_POLICY, sounds_enabled=SOUNDS_ENABLED):
    """Set up the Memory Match commands."""

    async def _owned_game(ctx):
        """Return the caller's game in this channel, replying if there is none."""
        game_view = get_active_game(GAME_ID, ctx.channel.id)
        if game_view is None:
            await ctx.send("There's no active Memory Match game in this channel.")
            return None
        if game_view.owner.id != ctx.author.id:
            await ctx.send("Only the player who started this game can do that.")
            return None
        return game_view

    @bot.hybrid_command(
        name="memory_start",
        description="Start a single-player Memory Match game"
    )
    @app_commands.describe(difficulty="easy (4 pairs), medium (7 pairs) or hard (10 pairs)")
    @app_commands.choices(difficulty=DIFFICULTY_CHOICES)
    async def start_game(ctx, difficulty: str = DEFAULT_DIFFICULTY):
        """Start a Memory Match game in this channel."""
        try:
            if get_active_game(GAME_ID, ctx.channel.id) is not None:
                await ctx.send("There's already an active game in this channel. Finish or end that game first.")
                return

            try:
                difficulty = Difficulty.parse(difficulty)
            except ValueError as e:
                await ctx.send(str(e))
                return

            game_view = create_game_view(ctx.author, ctx.channel, difficulty, scoring_policy,
                                         sounds_enabled=sounds_enabled)
            register_game(GAME_ID, ctx.channel.id, game_view)

            await ctx.send(
                f"🧠 Memory Match started for {ctx.author.mention} on **{difficulty.label}** "
                f"({difficulty.pair_count} pairs). Flip two cards at a time!"
            )

            try:
                await game_view.send_initial_message(ctx.channel)
            except Exception as e:
                logger.error(f"Error sending initial game message: {e}")
                await ctx.send("Error displaying the game. Please try starting a new game.")
                remove_game(GAME_ID, ctx.channel.id)
                return

            await game_view.feedback.play_welcome_cue()

            logger.info(f"Memory Match game started in channel {ctx.channel.id} by {ctx.author.display_name} on {difficulty.value}")

        except Exception as e:
            logger.error(f"Error starting Memory Match game: {e}\n{traceback.format_exc()}")
            await ctx.send("Error starting game. Please try again.")

    @bot.hybrid_command(name="memory_restart", description="Deal a new deck for your Memory Match game")
    async def restart_game(ctx):
        """Reset the current game at the same difficulty."""
        try:
            game_view = await _owned_game(ctx)
            if game_view is None:
                return

            game_view.game.reset()
            game_view.last_activity_time = time.time()
            await game_view.refresh("New deck dealt. Good luck!")
            await ctx.send("🔄 New deck dealt.", ephemeral=True)

        except Exception as e:
            logger.error(f"Error restarting Memory Match game: {e}")
            await ctx.send("Error restarting game. Please try again.")

    @bot.hybrid_command(name="memory_difficulty", description="Change the difficulty of your Memory Match game")
    @app_commands.describe(difficulty="easy (4 pairs), medium (7 pairs) or hard (10 pairs)")
    @app_commands.choices(difficulty=DIFFICULTY_CHOICES)
    async def change_difficulty(ctx, difficulty: str):
        """Reset the current game with a new difficulty."""
        try:
            game_view = await _owned_game(ctx)
            if game_view is None:
                return

            try:
                difficulty = Difficulty.parse(difficulty)
            except ValueError as e:
                await ctx.send(str(e))
                return

            game_view.game.reset(difficulty)
            game_view.last_activity_time = time.time()
            await game_view.refresh(f"Difficulty set to **{difficulty.label}** ({difficulty.pair_count} pairs).")
            await ctx.send(f"Difficulty changed to **{difficulty.label}**.", ephemeral=True)

        except Exception as e:
            logger.error(f"Error changing Memory Match difficulty: {e}")
            await ctx.send("Error changing difficulty. Please try again.")

    @bot.hybrid_command(name="memory_end", description="End your Memory Match game in this channel")
    async def end_game(ctx):
        """End the current Memory Match game in this channel."""
        try:
            game_view = await _owned_game(ctx)
            if game_view is None:
                return

            await end_game_internal(ctx.channel.id, game_view, f"Ended by {ctx.author.display_name}.")

        except Exception as e:
            logger.error(f"Error processing end game request: {e}")
            await ctx.send("Error ending the game. Please try again.")

    # Register the Memory Match commands with the bot
    return {
        "memory_start": start_game,
        "memory_restart": restart_game,
        "memory_difficulty": change_difficulty,
        "memory_end": end_game
    }

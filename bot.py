"""
Discord Memory Match Bot.
"""
import os
import asyncio
import discord
import logging
import traceback
import sys
from discord.ext import commands
from dotenv import load_dotenv

# Custom log formatter that safely handles emojis
class SafeFormatter(logging.Formatter):
    def format(self, record):
        try:
            return super().format(record)
        except UnicodeEncodeError:
            record.msg = str(record.msg).encode('utf-8', 'replace').decode('utf-8')
            if hasattr(record, 'args') and record.args:
                record.args = tuple(
                    str(arg).encode('utf-8', 'replace').decode('utf-8')
                    if isinstance(arg, str) else arg
                    for arg in record.args
                )
            return super().format(record)

from common.config import COMMAND_PREFIX, AFK_TIMEOUT_SECONDS, DEFAULT_SCORING_POLICY, SOUNDS_ENABLED
from common.database import database
from common.utils.game_utils import active_games, end_inactive_games
from common.commands.help import setup_help_command

# Memory Match Game (ID: 1001)
from games.game_1001_matching.game_1001 import GAME_ID, get_scoring_policy
from games.game_1001_matching.commands_1001 import (
    setup_memory_match_commands, end_game_internal
)

# Load environment variables
load_dotenv()
TOKEN = os.getenv("DISCORD_BOT_TOKEN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "ERROR").upper()
SCORING_POLICY = os.getenv("SCORING_POLICY", DEFAULT_SCORING_POLICY)
SOUNDS = os.getenv("SOUNDS_ENABLED", "1" if SOUNDS_ENABLED else "0").lower() not in ("0", "false", "no", "off")

# Setup logging
file_handler = logging.FileHandler("discord_bot.log", encoding='utf-8')
console_handler = logging.StreamHandler(sys.stdout)

# Apply the safe formatter to both handlers
formatter = SafeFormatter('%(asctime)s [%(levelname)s] %(message)s')
file_handler.setFormatter(formatter)
console_handler.setFormatter(formatter)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.ERROR),  # Only errors unless LOG_LEVEL says otherwise
    handlers=[
        file_handler,
        console_handler
    ]
)
logger = logging.getLogger("discord_bot")

# Setup intents
intents = discord.Intents.default()
intents.message_content = True

# Create bot
bot = commands.Bot(command_prefix=COMMAND_PREFIX, intents=intents, help_command=None)

# Error handler
@bot.event
async def on_error(event, *args, **kwargs):
    error_type, error_value, error_traceback = sys.exc_info()

    error_msg = f"Error in {event}: {error_type.__name__}: {error_value}\n"
    error_msg += "".join(traceback.format_tb(error_traceback))

    logger.error(error_msg)

@bot.event
async def on_command_error(ctx, error):
    if isinstance(error, commands.CommandNotFound):
        return

    logger.error(f"Command '{ctx.command}' error for {ctx.author} in {ctx.channel}: {error}")

    try:
        if isinstance(error, commands.CommandInvokeError):
            await ctx.send(f"Error executing command: {error.original.__class__.__name__}. Check logs for details.", delete_after=5.0)
        else:
            await ctx.send(f"Command error: {error.__class__.__name__}. Check logs for details.", delete_after=5.0)
    except discord.HTTPException as e:
        logger.error(f"Could not report command error: {e}")

@bot.event
async def on_ready():
    """When the bot is ready."""
    database["init_db"]()

    if not getattr(bot, "afk_task", None):
        bot.afk_task = bot.loop.create_task(check_afk_games())

    logger.info(f"Logged in as {bot.user.name} (ID: {bot.user.id})")
    logger.info(f"Discord.py version: {discord.__version__}")
    logger.info(f"Scoring policy: {SCORING_POLICY}")

    await bot.change_presence(activity=discord.Game(name="Memory Match"))

    print(f"{bot.user.name} is ready!")

async def check_afk_games():
    """Background task that ends inactive games."""
    while not bot.is_closed():
        try:
            await end_inactive_games(GAME_ID, AFK_TIMEOUT_SECONDS, end_game_internal)

            # Sleep for a while before checking again (every 10 seconds)
            await asyncio.sleep(10)

        except Exception as e:
            logger.error(f"Error in AFK checker: {e}")
            await asyncio.sleep(30)  # Sleep longer on error

@bot.command(name="sync", description="Sync slash commands with Discord")
@commands.is_owner()
async def sync(ctx):
    """Sync slash commands with Discord."""
    try:
        logger.info("Syncing slash commands...")
        await bot.tree.sync()
        await ctx.send("Slash commands synced successfully!", delete_after=1.0)
        await ctx.message.delete(delay=1.0)
        logger.info("Slash commands synced successfully")
    except Exception as e:
        logger.error(f"Error syncing slash commands: {e}")
        await ctx.send(f"Error syncing slash commands: {e}", delete_after=1.0)

async def setup_all_games():
    """Register every command."""
    help_commands = await setup_help_command(bot)
    memory_commands = await setup_memory_match_commands(bot, scoring_policy=SCORING_POLICY, sounds_enabled=SOUNDS)

    logger.info(f"Registered commands: {', '.join(list(help_commands.keys()) + list(memory_commands.keys()))}")

# Run the bot
async def main():
    """Main entry point."""
    try:
        # Fail early on a bad SCORING_POLICY value
        get_scoring_policy(SCORING_POLICY)

        active_games[GAME_ID] = {}

        await setup_all_games()

        await bot.start(TOKEN)
    except KeyboardInterrupt:
        logger.info("Bot shutdown initiated via keyboard interrupt")
        await bot.close()
    finally:
        logger.info("Bot has been shutdown")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Bot shutdown initiated by user (KeyboardInterrupt)")
    except Exception as e:
        logger.error(f"Unhandled exception: {e}")

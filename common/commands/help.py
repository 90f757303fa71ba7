"""
Help command for the Memory Match bot.
"""
import discord
import logging

from common.config import DIFFICULTY_PAIRS, REVEAL_DELAY_SECONDS, MATCH_POINTS, MISMATCH_PENALTY

logger = logging.getLogger("discord_bot")

class HelpView(discord.ui.View):
    def __init__(self, ctx, command_prefix):
        super().__init__(timeout=60)
        self.ctx = ctx
        self.command_prefix = command_prefix
        self.message = None

    @discord.ui.select(
        placeholder="Select a help topic",
        options=[
            discord.SelectOption(label="Overview", value="overview", description="What this bot does", default=True),
            discord.SelectOption(label="How to Play", value="rules", description="Flipping, matching and difficulty"),
            discord.SelectOption(label="Scoring", value="scoring", description="How points are awarded"),
            discord.SelectOption(label="Commands", value="commands", description="All Memory Match commands")
        ]
    )
    async def help_select(self, interaction: discord.Interaction, select: discord.ui.Select):
        """Handle selection of help category."""
        embed = create_help_embed(select.values[0], self.command_prefix)
        await interaction.response.edit_message(embed=embed, view=self)

    async def on_timeout(self):
        """Disable the view when it times out."""
        for item in self.children:
            item.disabled = True

        if not self.message:
            return
        try:
            await self.message.edit(view=self)
        except discord.HTTPException as e:
            logger.debug(f"Could not disable help menu: {e}")

def create_overview_embed(command_prefix):
    """Create an overview embed for the bot."""
    embed = discord.Embed(
        title="Memory Match Help",
        description="Flip the cards two at a time and find every pair of animals.",
        color=discord.Color.blue()
    )
    embed.add_field(
        name="Quick Start",
        value=(
            f"Start a game with `{command_prefix}memory_start [easy|medium|hard]`.\n"
            "Tap the ❓ buttons to flip cards."
        ),
        inline=False
    )
    embed.set_footer(text="Select a topic from the dropdown for more information")
    return embed

def create_rules_embed(command_prefix):
    pairs = ", ".join(f"{name} {count}" for name, count in DIFFICULTY_PAIRS.items())
    embed = discord.Embed(title="How to Play", color=discord.Color.blue())
    embed.add_field(
        name="Rules",
        value=(
            "1. Flip a card, then flip a second one\n"
            f"2. Both stay visible for {REVEAL_DELAY_SECONDS:g} seconds\n"
            "3. A pair stays revealed and scores points\n"
            "4. Other cards turn face down again\n"
            "5. Clear the board to win!"
        ),
        inline=False
    )
    embed.add_field(name="Difficulty (pairs)", value=pairs, inline=False)
    return embed

def create_scoring_embed(command_prefix):
    embed = discord.Embed(title="Scoring", color=discord.Color.blue())
    embed.add_field(
        name="decayed (default)",
        value=f"Each card of a pair is worth {MATCH_POINTS} minus one for every extra time it was flipped (minimum 1).",
        inline=False
    )
    embed.add_field(name="flat", value=f"{MATCH_POINTS} points per pair.", inline=False)
    embed.add_field(
        name="flat_penalty",
        value=f"{MATCH_POINTS} points per pair, {MISMATCH_PENALTY} points lost per miss.",
        inline=False
    )
    return embed

def create_commands_embed(command_prefix):
    embed = discord.Embed(title="Commands", color=discord.Color.blue())
    embed.add_field(
        name="Memory Match",
        value=(
            f"`{command_prefix}memory_start [difficulty]` - Start a game in this channel\n"
            f"`{command_prefix}memory_restart` - Deal a new deck\n"
            f"`{command_prefix}memory_difficulty <difficulty>` - Change difficulty and deal a new deck\n"
            f"`{command_prefix}memory_end` - End your game"
        ),
        inline=False
    )
    embed.add_field(
        name="Help",
        value=f"`{command_prefix}help` - Show this help menu",
        inline=False
    )
    embed.add_field(
        name="Notes",
        value="• Only the player who started a game can press its buttons\n• Games end after inactivity",
        inline=False
    )
    return embed

HELP_TOPICS = {
    "overview": create_overview_embed,
    "rules": create_rules_embed,
    "scoring": create_scoring_embed,
    "commands": create_commands_embed,
}

def create_help_embed(topic, command_prefix):
    """Create the embed for a help topic, falling back to the overview."""
    builder = HELP_TOPICS.get(topic, create_overview_embed)
    return builder(command_prefix)

async def setup_help_command(bot):
    """Set up the help command."""

    @bot.hybrid_command(name="help", description="Show how to play Memory Match")
    async def help_cmd(ctx):
        """Show help information about the game."""
        try:
            view = HelpView(ctx, bot.command_prefix)
            embed = create_overview_embed(bot.command_prefix)
            view.message = await ctx.send(embed=embed, view=view)

        except Exception as e:
            logger.error(f"Error showing help: {e}")
            await ctx.send("Error showing help. Please try again.")

    return {"help": help_cmd}

import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional
import logging

from wordle_bot.utils.embeds import build_leaderboard_embed, build_podium_embed
from wordle_bot.utils.error_embeds import ErrorEmbeds
from wordle_bot.utils.wordle_exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

HELP_TEXT = "\n".join([
    "**Available Commands**",
    "",
    "• `/scores` — Overall leaderboard",
    "• `/averages` — Average guesses leaderboard",
    "• `/weekly` — This week's winners",
    "• `/podium [wordle-day]` — Podium for today or a specific day",
    "• `/today` — Show today's Wordle number",
    "• `/config` — Show or update channel settings",
    "• `/ping` — Latency check",
    "",
    "Paste your Wordle share text in the channel to log a result.",
])

class LeaderboardCog(commands.Cog):
    """Wordle leaderboard and podium commands"""

    def __init__(self, bot):
        self.bot = bot
        self.leaderboard_service = bot.leaderboard_service

    async def _send_leaderboard(self, interaction: discord.Interaction, leaderboard_type: str):
        await interaction.response.defer()

        try:
            board = await self.leaderboard_service.get_leaderboard(str(interaction.channel_id), leaderboard_type)
            if not board:
                await interaction.followup.send(
                    f"No {leaderboard_type} data yet. Send a Wordle result to get started!"
                )
                return
            await interaction.followup.send(embed=build_leaderboard_embed(leaderboard_type, board))

        except StoreUnavailableError:
            await interaction.followup.send(embed=ErrorEmbeds.storage_unavailable(), ephemeral=True)
        except Exception as e:
            logger.error(f"Error in {leaderboard_type} command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while fetching leaderboard data. Please try again later."))

    @app_commands.command(name="scores", description="Show overall Wordle leaderboard")
    async def scores(self, interaction: discord.Interaction):
        await self._send_leaderboard(interaction, "scores")

    @app_commands.command(name="averages", description="Show average guesses leaderboard")
    async def averages(self, interaction: discord.Interaction):
        await self._send_leaderboard(interaction, "averages")

    @app_commands.command(name="weekly", description="Show weekly Wordle leaderboard")
    async def weekly(self, interaction: discord.Interaction):
        await self._send_leaderboard(interaction, "weekly")

    @app_commands.command(name="podium", description="Show podium for a specific day")
    @app_commands.describe(wordle_day="Wordle number (defaults to today's puzzle)")
    async def podium(self, interaction: discord.Interaction, wordle_day: Optional[app_commands.Range[int, 1]] = None):
        """Display the podium for a puzzle."""
        await interaction.response.defer()

        try:
            channel_id = str(interaction.channel_id)
            if wordle_day is None:
                wordle_day = await self.leaderboard_service.get_today(channel_id)

            podium = await self.leaderboard_service.get_podium(channel_id, wordle_day)
            if not podium:
                await interaction.followup.send(f"No submissions stored for Wordle {wordle_day} yet.")
                return
            await interaction.followup.send(embed=build_podium_embed(wordle_day, podium))

        except StoreUnavailableError:
            await interaction.followup.send(embed=ErrorEmbeds.storage_unavailable(), ephemeral=True)
        except Exception as e:
            logger.error(f"Error in podium command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while fetching the podium. Please try again later."))

    @app_commands.command(name="today", description="Show today's Wordle number")
    async def today(self, interaction: discord.Interaction):
        wordle_day = await self.leaderboard_service.get_today(str(interaction.channel_id))
        await interaction.response.send_message(f"Today's Wordle number is {wordle_day}.")

    @app_commands.command(name="ping", description="Check bot latency")
    async def ping(self, interaction: discord.Interaction):
        await interaction.response.send_message(f"Pong! 🏓 {self.bot.latency * 1000:.0f}ms")

    @app_commands.command(name="help", description="Show available commands")
    async def help(self, interaction: discord.Interaction):
        await interaction.response.send_message(HELP_TEXT, ephemeral=True)

async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))

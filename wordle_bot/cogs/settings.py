import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional
import logging

from wordle_bot.constants import UIConstants
from wordle_bot.data_models.wordle import ChatSettings
from wordle_bot.utils.error_embeds import ErrorEmbeds
from wordle_bot.utils.wordle_exceptions import SettingsValidationError, StoreUnavailableError

logger = logging.getLogger(__name__)

def build_settings_embed(settings: ChatSettings) -> discord.Embed:
    embed = discord.Embed(title="⚙️ Channel Configuration", color=UIConstants.DEFAULT_EMBED_COLOR)
    early = f"on (after {settings.early_podium_threshold} players)" if settings.early_podium else "off"
    embed.add_field(name="Early podium", value=early, inline=True)
    embed.add_field(name="Leaderboard notices", value="on" if settings.notify_leaderboard else "off", inline=True)
    embed.add_field(name="Timing notices", value="on" if settings.notify_timing else "off", inline=True)
    embed.add_field(name="Digest time", value=settings.digest_time, inline=True)
    embed.add_field(name="Timezone", value=settings.timezone, inline=True)
    return embed

class SettingsCog(commands.Cog):
    """Per-channel notification settings"""

    def __init__(self, bot):
        self.bot = bot
        self.settings_service = bot.settings_service

    @app_commands.command(name="config", description="Show or update channel configuration")
    @app_commands.describe(
        early_podium="Post the podium early once enough players have submitted",
        early_podium_threshold="Number of players that triggers the early podium",
        notify_leaderboard="Announce when someone passes another player",
        notify_timing="Comment on unusually early or late submissions",
        digest_time="Daily digest time, HH:MM in the channel timezone",
        timezone="IANA timezone name, e.g. Europe/London"
    )
    async def config(
        self,
        interaction: discord.Interaction,
        early_podium: Optional[bool] = None,
        early_podium_threshold: Optional[int] = None,
        notify_leaderboard: Optional[bool] = None,
        notify_timing: Optional[bool] = None,
        digest_time: Optional[str] = None,
        timezone: Optional[str] = None
    ):
        """Show settings, or apply any options given."""
        channel_id = str(interaction.channel_id)
        changes = dict(
            early_podium=early_podium,
            early_podium_threshold=early_podium_threshold,
            notify_leaderboard=notify_leaderboard,
            notify_timing=notify_timing,
            digest_time=digest_time,
            timezone=timezone,
        )
        wants_update = any(value is not None for value in changes.values())

        if wants_update and isinstance(interaction.user, discord.Member) \
                and not interaction.user.guild_permissions.manage_channels:
            await interaction.response.send_message(embed=ErrorEmbeds.permission_denied(), ephemeral=True)
            return

        try:
            if wants_update:
                settings = await self.settings_service.update(channel_id, **changes)
                logger.info(f"Channel {channel_id} settings updated by {interaction.user.id}")
            else:
                settings = await self.settings_service.get(channel_id)
            await interaction.response.send_message(embed=build_settings_embed(settings))

        except SettingsValidationError as e:
            await interaction.response.send_message(embed=ErrorEmbeds.invalid_input(e.user_message), ephemeral=True)
        except StoreUnavailableError:
            await interaction.response.send_message(embed=ErrorEmbeds.storage_unavailable(), ephemeral=True)

async def setup(bot):
    await bot.add_cog(SettingsCog(bot))

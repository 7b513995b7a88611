import asyncio
import logging
import traceback
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from wordle_bot.config import Config
from wordle_bot.database.database import Database
from wordle_bot.database.wordle_operations import WordleOperations
from wordle_bot.services.chat_settings import ChatSettingsService
from wordle_bot.services.leaderboard import LeaderboardService
from wordle_bot.services.submissions import SubmissionService
from wordle_bot.utils.logger import setup_logger

class WordleBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        self.tree.on_error = self.on_app_command_error

        self.db: Optional[Database] = None
        self.wordle_ops: Optional[WordleOperations] = None
        self.settings_service: Optional[ChatSettingsService] = None
        self.submission_service: Optional[SubmissionService] = None
        self.leaderboard_service: Optional[LeaderboardService] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Wordle Bot...")

        self.db = Database()
        await self.db.initialize()

        # Services reach the session factory lazily so an unconfigured store
        # surfaces as StoreUnavailableError per command instead of at startup
        self.wordle_ops = WordleOperations(self.db)
        self.settings_service = ChatSettingsService(self._session_factory)
        self.submission_service = SubmissionService(self.wordle_ops, self.settings_service)
        self.leaderboard_service = LeaderboardService(self.wordle_ops, self.settings_service)

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Wordle Bot setup complete!")

    def _session_factory(self):
        return self.db.session_factory()

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'wordle_bot.cogs.submissions',
            'wordle_bot.cogs.leaderboard',
            'wordle_bot.cogs.settings',
            'wordle_bot.cogs.digest',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Publish slash commands, per guild when guild ids are configured."""
        if not self.tree.get_commands():
            self.logger.warning("No slash commands registered; skipping sync")
            return

        try:
            guild_ids = Config.get_guild_ids()
        except ValueError as e:
            self.logger.error(f"Cannot sync commands: {e}")
            return

        if not guild_ids:
            # Global propagation can take up to an hour
            try:
                synced = await self.tree.sync()
                self.logger.info(f"Synced {len(synced)} command(s) globally")
            except discord.HTTPException as e:
                self.logger.error(f"Could not sync commands globally: {e}", exc_info=True)
            return

        for guild_id in guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            try:
                synced = await self.tree.sync(guild=guild)
                self.logger.info(f"Synced {len(synced)} command(s) to guild {guild_id}")
            except discord.HTTPException as e:
                # Message intake keeps working without slash commands
                self.logger.error(f"Could not sync commands to guild {guild_id}: {e}", exc_info=True)

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

        await self.change_presence(
            activity=discord.Game(name="Wordle | /help")
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'
        if isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Permission denied for command '{command_name}' by user {interaction.user}")
            error_message = "❌ You don't have permission to use this command."
        elif isinstance(error, app_commands.CommandOnCooldown):
            error_message = f"❌ Command is on cooldown. Try again in {error.retry_after:.2f} seconds."
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)
            error_message = "❌ An unexpected error occurred while processing your command."

        try:
            if interaction.response.is_done():
                await interaction.followup.send(error_message, ephemeral=True)
            else:
                await interaction.response.send_message(error_message, ephemeral=True)
        except Exception as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Wordle Bot...")

        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = WordleBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()

"""
Digest Cog - scheduled podium digests

Polls the digest service on a fixed interval. The service decides which
channels are due and records what has been sent, so restarting the bot or
polling often never produces a duplicate digest.
"""

from discord.ext import commands, tasks

from wordle_bot.config import Config
from wordle_bot.data_models.wordle import DigestReport
from wordle_bot.services.digest import DigestService
from wordle_bot.utils.embeds import build_digest_embed
from wordle_bot.utils.logger import setup_logger

logger = setup_logger(__name__)


class DigestCog(commands.Cog):
    """Background digest task"""

    def __init__(self, bot):
        self.bot = bot
        self.digest_service = DigestService(bot.wordle_ops, bot.settings_service, self.send_report)
        self.logger = logger
        self.run_digests.change_interval(minutes=Config.DIGEST_POLL_MINUTES)

    async def cog_load(self):
        if self.bot.db and self.bot.db.is_ready:
            self.run_digests.start()
            self.logger.info("DigestCog: Background digest task started")
        else:
            self.logger.warning("DigestCog: Database not available, digests disabled")

    def cog_unload(self):
        self.run_digests.cancel()
        self.logger.info("DigestCog: Background digest task stopped")

    async def send_report(self, report: DigestReport):
        """Post a digest to its channel."""
        channel = self.bot.get_channel(int(report.channel_id))
        if channel is None:
            channel = await self.bot.fetch_channel(int(report.channel_id))
        await channel.send(embed=build_digest_embed(report))

    @tasks.loop(minutes=5)
    async def run_digests(self):
        try:
            await self.digest_service.run_once()
        except Exception as e:
            self.logger.error(f"Error in digest task: {e}", exc_info=True)

    @run_digests.before_loop
    async def before_digest_task(self):
        """Wait for bot to be ready before starting the digest task"""
        await self.bot.wait_until_ready()

async def setup(bot):
    await bot.add_cog(DigestCog(bot))

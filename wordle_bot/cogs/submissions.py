"""
SubmissionsCog - Wordle result intake

Watches channel messages for Wordle share text and logs results. Messages
that are not shares are ignored without a reply.
"""

import discord
from discord.ext import commands
import logging

from wordle_bot.utils.embeds import build_podium_embed, build_submission_reply
from wordle_bot.utils.wordle_exceptions import (
    DatabaseError, DuplicateSubmissionError, InvalidSubmissionError,
    StalePuzzleError, StoreUnavailableError
)

logger = logging.getLogger(__name__)

class SubmissionsCog(commands.Cog):
    """Logs Wordle results shared in chat."""

    def __init__(self, bot):
        self.bot = bot
        self.submission_service = bot.submission_service

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or not message.content:
            return

        channel_id = str(message.channel.id)
        player_id = str(message.author.id)

        try:
            outcome = await self.submission_service.handle_message(
                channel_id, player_id, message.content, message.created_at
            )
            if outcome is None:
                return

            await message.channel.send(
                build_submission_reply(outcome),
                allowed_mentions=discord.AllowedMentions(users=True)
            )
            if outcome.early_podium:
                await message.channel.send(
                    "🏁 Enough players are in for today. Here's the early podium:",
                    embed=build_podium_embed(outcome.result.wordle_day, outcome.early_podium)
                )

        except InvalidSubmissionError as e:
            # Structurally broken shares are dropped quietly
            logger.debug(f"Ignoring invalid share from {player_id}: {e}")

        except (StalePuzzleError, DuplicateSubmissionError, StoreUnavailableError) as e:
            await message.reply(e.user_message, mention_author=False)

        except DatabaseError as e:
            logger.error(f"Database error for user {player_id}: {e}")
            await message.reply(e.user_message, mention_author=False)

        except Exception as e:
            logger.error(f"Unexpected error handling Wordle share from {player_id}: {e}", exc_info=True)
            await message.reply("❌ An unexpected error occurred. Please try again later.", mention_author=False)

async def setup(bot):
    await bot.add_cog(SubmissionsCog(bot))

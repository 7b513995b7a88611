"""
Tests for scheduled podium digests.
"""

from dataclasses import replace
from datetime import datetime, timezone
from fractions import Fraction

from wordle_bot.data_models.wordle import PodiumEntry
from wordle_bot.services.chat_settings import default_settings
from wordle_bot.services.digest import DigestService

# Puzzle 1599 in UTC, before and after the default 19:00 digest time
TUESDAY_NOON = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
TUESDAY_EVENING = datetime(2025, 11, 4, 20, 0, tzinfo=timezone.utc)


class RecordingSender:
    """Collects delivered reports, optionally failing for some channels."""

    def __init__(self, fail_channels=()):
        self.reports = []
        self.fail_channels = set(fail_channels)

    async def __call__(self, report):
        if report.channel_id in self.fail_channels:
            raise RuntimeError(f"channel {report.channel_id} is unreachable")
        self.reports.append(report)


async def seed(ops, make_result, channel_id="chan"):
    for result in (
        make_result("alice", 1596, 2, channel_id=channel_id),
        make_result("alice", 1598, 3, channel_id=channel_id),
        make_result("bob", 1598, 4, channel_id=channel_id),
        make_result("alice", 1599, 4, channel_id=channel_id),
        make_result("bob", 1599, 4, channel_id=channel_id),
    ):
        await ops.save_submission(result)


class TestDueDays:

    def test_before_digest_time_only_yesterday(self):
        assert DigestService.due_days(default_settings("chan"), TUESDAY_NOON) == [1598]

    def test_after_digest_time_includes_today(self):
        assert DigestService.due_days(default_settings("chan"), TUESDAY_EVENING) == [1598, 1599]

    def test_digest_time_is_inclusive(self):
        settings = replace(default_settings("chan"), digest_time="12:00")
        assert DigestService.due_days(settings, TUESDAY_NOON) == [1598, 1599]

    def test_uses_channel_timezone(self):
        # 01:00 UTC on puzzle 1600 is 20:00 on puzzle 1599 in New York
        instant = datetime(2025, 11, 5, 1, 0, tzinfo=timezone.utc)
        east = replace(default_settings("east"), timezone="America/New_York")
        assert DigestService.due_days(east, instant) == [1598, 1599]
        assert DigestService.due_days(default_settings("utc"), instant) == [1599]


class TestRunOnce:

    def test_sends_due_digests_once(self, run_with_store, make_result):
        sender = RecordingSender()

        async def scenario(db, ops, settings):
            await seed(ops, make_result)
            service = DigestService(ops, settings, sender)
            first = await service.run_once(TUESDAY_EVENING)
            second = await service.run_once(TUESDAY_EVENING)
            return first, second

        first, second = run_with_store(scenario)
        assert [r.wordle_day for r in first] == [1598, 1599]
        assert second == []
        assert [r.wordle_day for r in sender.reports] == [1598, 1599]

    def test_today_waits_for_digest_time(self, run_with_store, make_result):
        sender = RecordingSender()

        async def scenario(db, ops, settings):
            await seed(ops, make_result)
            service = DigestService(ops, settings, sender)
            await service.run_once(TUESDAY_NOON)
            return await ops.has_podium_been_sent("chan", 1599)

        assert run_with_store(scenario) is False
        assert [r.wordle_day for r in sender.reports] == [1598]

    def test_report_contents(self, run_with_store, make_result):
        sender = RecordingSender()

        async def scenario(db, ops, settings):
            await seed(ops, make_result)
            await DigestService(ops, settings, sender).run_once(TUESDAY_EVENING)

        run_with_store(scenario)
        report = sender.reports[-1]
        assert report.channel_id == "chan"
        assert report.wordle_day == 1599
        assert report.podium == [PodiumEntry(guesses=4, player_ids=frozenset({"alice", "bob"}))]
        assert report.scores == {"alice": Fraction(5, 2), "bob": Fraction(1, 2)}
        # Puzzle 1596 falls in the previous Sunday-started week
        assert report.weekly_scores == {"alice": Fraction(3, 2), "bob": Fraction(1, 2)}
        assert report.averages["bob"] == 4
        assert report.generated_at == TUESDAY_EVENING

    def test_puzzle_without_submissions_is_not_claimed(self, run_with_store, make_result):
        sender = RecordingSender()

        async def scenario(db, ops, settings):
            await ops.save_submission(make_result("alice", 1599, 3))
            await DigestService(ops, settings, sender).run_once(TUESDAY_EVENING)
            return await ops.has_podium_been_sent("chan", 1598)

        assert run_with_store(scenario) is False
        assert [r.wordle_day for r in sender.reports] == [1599]

    def test_failed_delivery_is_retried(self, run_with_store, make_result):
        broken = RecordingSender(fail_channels={"chan"})
        working = RecordingSender()

        async def scenario(db, ops, settings):
            await seed(ops, make_result)
            failed = await DigestService(ops, settings, broken).run_once(TUESDAY_NOON)
            claimed = await ops.has_podium_been_sent("chan", 1598)
            retried = await DigestService(ops, settings, working).run_once(TUESDAY_NOON)
            return failed, claimed, retried

        failed, claimed, retried = run_with_store(scenario)
        assert failed == []
        assert claimed is False
        assert [r.wordle_day for r in retried] == [1598]

    def test_one_broken_channel_does_not_block_others(self, run_with_store, make_result):
        sender = RecordingSender(fail_channels={"broken"})

        async def scenario(db, ops, settings):
            await seed(ops, make_result, channel_id="broken")
            await seed(ops, make_result, channel_id="healthy")
            return await DigestService(ops, settings, sender).run_once(TUESDAY_NOON)

        delivered = run_with_store(scenario)
        assert [(r.channel_id, r.wordle_day) for r in delivered] == [("healthy", 1598)]

    def test_digest_follows_channel_timezone(self, run_with_store, make_result):
        sender = RecordingSender()
        instant = datetime(2025, 11, 5, 1, 0, tzinfo=timezone.utc)

        async def scenario(db, ops, settings):
            await settings.update("east", timezone="America/New_York")
            await seed(ops, make_result, channel_id="east")
            await seed(ops, make_result, channel_id="utc")
            return await DigestService(ops, settings, sender).run_once(instant)

        delivered = run_with_store(scenario)
        assert [(r.channel_id, r.wordle_day) for r in delivered] == [
            ("east", 1598), ("east", 1599), ("utc", 1599)
        ]

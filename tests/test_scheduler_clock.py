"""Scenario tests for apps.leaderboard_bot.scheduler.clock against in-memory collaborators."""

from __future__ import annotations

from dataclasses import replace

import pytest

from apps.leaderboard_bot.scheduler.clock import SchedulerClock, SchedulerContext
from libs.db.schedule_events import EventSource, EventType
from libs.db.servers import Server
from tests.fakes import FakeDelivery, FakePublisher, FakeServers, at


def make_clock(config, servers, ledger, publisher, delivery, reloader) -> SchedulerClock:
    return SchedulerClock(
        SchedulerContext(
            config=config,
            servers=FakeServers(servers),
            ledger=ledger,
            publisher=publisher,
            delivery=delivery,
            reloader=reloader,
        )
    )


class TestWeeklyScenario:
    @pytest.mark.asyncio
    async def test_fires_once_per_period(
        self, scheduler_config, weekly_server, ledger, publisher, delivery, reloader
    ) -> None:
        clock = make_clock(scheduler_config, [weekly_server], ledger, publisher, delivery, reloader)

        first = await clock.tick(at(2024, 3, 29, 18, 0))
        second = await clock.tick(at(2024, 3, 29, 18, 1))
        next_week = await clock.tick(at(2024, 4, 5, 18, 0))

        assert first == [(1, EventType.LEADERBOARD_WEEK)]
        assert second == []
        assert next_week == [(1, EventType.LEADERBOARD_WEEK)]
        assert delivery.delivered[1] == ["leaderboard", "leaderboard"]
        assert [e[2] for e in ledger.events] == [EventSource.SCHEDULE, EventSource.SCHEDULE]
        assert publisher.calls == [(1, "Week"), (1, "Week")]

    @pytest.mark.asyncio
    async def test_outside_slot_does_nothing(
        self, scheduler_config, weekly_server, ledger, publisher, delivery, reloader
    ) -> None:
        clock = make_clock(scheduler_config, [weekly_server], ledger, publisher, delivery, reloader)

        assert await clock.tick(at(2024, 3, 29, 17, 55)) == []
        assert ledger.events == []
        assert publisher.calls == []

    @pytest.mark.asyncio
    async def test_unsubscribed_server_is_ignored(
        self, scheduler_config, ledger, publisher, delivery, reloader
    ) -> None:
        server = Server(1, "Alpha", channel_id=100)
        clock = make_clock(scheduler_config, [server], ledger, publisher, delivery, reloader)

        assert await clock.tick(at(2024, 3, 29, 18, 0)) == []

    @pytest.mark.asyncio
    async def test_manual_publish_suppresses_schedule(
        self, scheduler_config, weekly_server, ledger, publisher, delivery, reloader
    ) -> None:
        clock = make_clock(scheduler_config, [weekly_server], ledger, publisher, delivery, reloader)

        published = await clock.trigger(weekly_server, EventType.LEADERBOARD_WEEK, at(2024, 3, 29, 17, 30))
        fired = await clock.tick(at(2024, 3, 29, 18, 0))

        assert published is True
        assert fired == []
        assert ledger.events == [
            (1, EventType.LEADERBOARD_WEEK, EventSource.MANUAL, int(at(2024, 3, 29, 17, 30).timestamp()))
        ]

    @pytest.mark.asyncio
    async def test_empty_leaderboard_is_recorded_without_delivery(
        self, scheduler_config, weekly_server, ledger, delivery, reloader
    ) -> None:
        clock = make_clock(scheduler_config, [weekly_server], ledger, FakePublisher(batches=[]), delivery, reloader)

        fired = await clock.tick(at(2024, 3, 29, 18, 0))

        assert fired == [(1, EventType.LEADERBOARD_WEEK)]
        assert delivery.delivered == {}

    @pytest.mark.asyncio
    async def test_server_without_channel_is_skipped(
        self, scheduler_config, weekly_server, ledger, publisher, delivery, reloader
    ) -> None:
        server = replace(weekly_server, channel_id=None)
        clock = make_clock(scheduler_config, [server], ledger, publisher, delivery, reloader)

        assert await clock.tick(at(2024, 3, 29, 18, 0)) == []
        assert ledger.events == []
        assert publisher.calls == []


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_delivery_is_retried(
        self, scheduler_config, weekly_server, ledger, publisher, reloader
    ) -> None:
        failing = FakeDelivery(fail=True)
        clock = make_clock(scheduler_config, [weekly_server], ledger, publisher, failing, reloader)

        assert await clock.tick(at(2024, 3, 29, 18, 0)) == []
        assert ledger.events == []

        failing.fail = False
        assert await clock.tick(at(2024, 3, 29, 18, 5)) == [(1, EventType.LEADERBOARD_WEEK)]
        assert len(ledger.events) == 1

    @pytest.mark.asyncio
    async def test_one_server_failure_does_not_block_others(
        self, scheduler_config, weekly_server, ledger, delivery, reloader
    ) -> None:
        other = replace(weekly_server, server_id=2, server_name="Beta", channel_id=200)
        publisher = FakePublisher(fail_for=[1])
        clock = make_clock(scheduler_config, [weekly_server, other], ledger, publisher, delivery, reloader)

        fired = await clock.tick(at(2024, 3, 29, 18, 0))

        assert fired == [(2, EventType.LEADERBOARD_WEEK)]
        assert list(delivery.delivered) == [2]

    @pytest.mark.asyncio
    async def test_server_listing_failure_skips_tick(
        self, scheduler_config, ledger, publisher, delivery, reloader
    ) -> None:
        class BrokenServers:
            async def list_servers(self):
                raise ConnectionError("database down")

        clock = SchedulerClock(
            SchedulerContext(scheduler_config, BrokenServers(), ledger, publisher, delivery, reloader)
        )

        assert await clock.tick(at(2024, 3, 29, 18, 0)) == []

    @pytest.mark.asyncio
    async def test_manual_trigger_propagates_errors(
        self, scheduler_config, weekly_server, ledger, delivery, reloader
    ) -> None:
        clock = make_clock(
            scheduler_config, [weekly_server], ledger, FakePublisher(fail_for=[1]), delivery, reloader
        )

        with pytest.raises(RuntimeError):
            await clock.trigger(weekly_server, EventType.LEADERBOARD_WEEK, at(2024, 3, 29, 12))
        assert ledger.events == []


class TestReloadAndMonthly:
    @pytest.mark.asyncio
    async def test_reload_runs_on_interval(self, scheduler_config, ledger, publisher, delivery, reloader) -> None:
        server = Server(1, "Alpha", is_sub_reload=True)
        clock = make_clock(scheduler_config, [server], ledger, publisher, delivery, reloader)

        fired = [
            await clock.tick(at(2024, 3, 1, 10, 0)),
            await clock.tick(at(2024, 3, 1, 10, 5)),
            await clock.tick(at(2024, 3, 1, 13, 0)),
        ]

        assert fired == [[(1, EventType.RELOAD)], [], [(1, EventType.RELOAD)]]
        assert reloader.reloaded == [1, 1]

    @pytest.mark.asyncio
    async def test_monthly_and_weekly_in_same_tick(
        self, scheduler_config, weekly_server, ledger, publisher, delivery, reloader
    ) -> None:
        server = replace(weekly_server, is_sub_month=True)
        clock = make_clock(scheduler_config, [server], ledger, publisher, delivery, reloader)

        fired = await clock.tick(at(2024, 3, 29, 18, 0))

        assert fired == [(1, EventType.LEADERBOARD_WEEK), (1, EventType.LEADERBOARD_MONTH)]
        assert publisher.calls == [(1, "Week"), (1, "Month")]


class TestLocalTime:
    def test_converts_to_configured_zone(self, scheduler_config, ledger, publisher, delivery, reloader) -> None:
        config = replace(scheduler_config, timezone="Europe/Paris")
        clock = make_clock(config, [], ledger, publisher, delivery, reloader)

        # 17:00 UTC is 18:00 in Paris in winter
        assert clock.local_now(at(2024, 1, 5, 17, 0)).hour == 18

    def test_start_is_noop_when_disabled(self, scheduler_config, ledger, publisher, delivery, reloader) -> None:
        config = replace(scheduler_config, enabled=False)
        clock = make_clock(config, [], ledger, publisher, delivery, reloader)

        clock.start()

        assert clock._loop is None

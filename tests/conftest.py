"""Shared fixtures: hero names, schedule config and in-memory scheduler collaborators."""

from __future__ import annotations

from typing import Dict, List

import pytest

from apps.leaderboard_bot.bot_config import SchedulerConfig
from libs.db.servers import Server, ServerPlayer
from tests.fakes import FakeDelivery, FakeLedger, FakePublisher, FakeReloader


@pytest.fixture
def hero_names() -> Dict[int, str]:
    return {1: "Anti-Mage", 2: "Axe", 3: "Bane"}


@pytest.fixture
def scheduler_config() -> SchedulerConfig:
    # Fridays 18:00 weekly, last Friday 18:00 monthly
    return SchedulerConfig(
        timezone="UTC",
        weekly_day=5,
        weekly_hour=18,
        monthly_week=5,
        monthly_weekday=5,
        monthly_hour=18,
    )


@pytest.fixture
def weekly_server() -> Server:
    return Server(server_id=1, server_name="Alpha", channel_id=100, is_sub_week=True)


@pytest.fixture
def players() -> List[ServerPlayer]:
    return [
        ServerPlayer(server_id=1, player_id=42, player_name="Alice"),
        ServerPlayer(server_id=1, player_id=43, discord_name="bob#1"),
    ]


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def delivery() -> FakeDelivery:
    return FakeDelivery()


@pytest.fixture
def reloader() -> FakeReloader:
    return FakeReloader()

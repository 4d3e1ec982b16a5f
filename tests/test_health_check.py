"""Tests for the container health check."""

from __future__ import annotations

from unittest.mock import AsyncMock

import asyncpg
import pytest

from apps.leaderboard_bot import health_check


@pytest.fixture
def readiness_file(tmp_path):
    return tmp_path / "ready"


class TestReadinessFile:
    def test_mark_ready_then_not_ready(self, readiness_file) -> None:
        health_check.mark_ready(readiness_file)
        assert readiness_file.is_file()

        health_check.mark_not_ready(readiness_file)
        assert not readiness_file.exists()

    def test_mark_not_ready_without_file(self, readiness_file) -> None:
        health_check.mark_not_ready(readiness_file)

        assert not readiness_file.exists()


class TestIsHealthy:
    @pytest.mark.asyncio
    async def test_not_ready_skips_database(self, readiness_file, monkeypatch) -> None:
        db_check = AsyncMock(return_value=True)
        monkeypatch.setattr(health_check, "check_database", db_check)

        assert await health_check.is_healthy(readiness_file) is False
        db_check.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ready_and_database_up(self, readiness_file, monkeypatch) -> None:
        readiness_file.touch()
        monkeypatch.setattr(health_check, "check_database", AsyncMock(return_value=True))

        assert await health_check.is_healthy(readiness_file) is True


class TestCheckDatabase:
    @pytest.mark.asyncio
    async def test_unreachable_database(self, monkeypatch) -> None:
        monkeypatch.setattr(
            health_check, "get_db_connection", AsyncMock(side_effect=ConnectionError("refused"))
        )

        assert await health_check.check_database() is False

    @pytest.mark.asyncio
    async def test_query_answered(self, monkeypatch) -> None:
        conn = AsyncMock()
        conn.fetchval.return_value = 1
        monkeypatch.setattr(health_check, "get_db_connection", AsyncMock(return_value=conn))

        assert await health_check.check_database() is True
        conn.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_error_closes_connection(self, monkeypatch) -> None:
        conn = AsyncMock()
        conn.fetchval.side_effect = asyncpg.PostgresError("boom")
        monkeypatch.setattr(health_check, "get_db_connection", AsyncMock(return_value=conn))

        assert await health_check.check_database() is False
        conn.close.assert_awaited_once()

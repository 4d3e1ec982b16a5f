"""
Manual reload: refresh registered players from OpenDota and record a Manual Reload event.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time

from typing import List, Optional

from apps.match_ingestion.reload import ReloadPlayerStat, ReloadSummary, reload_server
from libs.db.database import apply_schema, create_db_pool
from libs.db.schedule_events import EventSource, EventType, insert_event
from libs.db.servers import get_server, list_servers


def print_player_stats(stats: List[ReloadPlayerStat]) -> None:
    for stat in stats:
        if stat.failed:
            print(f"  ✗ {stat.display_name} ({stat.player_id}): {stat.error}")
        elif stat.is_empty:
            print(f"  - {stat.display_name} ({stat.player_id}): no matches on OpenDota")
        else:
            print(f"  ✓ {stat.display_name} ({stat.player_id}): {stat.inserted} new matches")


async def run_reload(server_id: Optional[int], record_event: bool, init_schema: bool) -> int:
    """Reload one server (or every server) and return the number of failed players."""
    print("=" * 70)
    print("PLAYER MATCH RELOAD")
    print("=" * 70)

    pool = await create_db_pool()
    try:
        if init_schema:
            async with pool.acquire() as conn:
                await apply_schema(conn)
            print("✓ Schema applied")

        if server_id is not None:
            server = await get_server(pool, server_id)
            if server is None:
                print(f"✗ Server {server_id} is not registered")
                return 1
            servers = [server]
        else:
            servers = await list_servers(pool)

        failures = 0
        for server in servers:
            print("\n" + "-" * 70)
            print(f"Server: {server.server_name} ({server.server_id})")
            print("-" * 70)

            stats = await reload_server(pool, server)
            print_player_stats(stats)
            summary = ReloadSummary.from_stats(stats)
            failures += summary.failure_count
            print(
                f"\n{summary.success_count} succeeded, {summary.failure_count} failed, "
                f"{summary.removed_count} without matches"
            )

            if record_event:
                await insert_event(
                    pool, server.server_id, EventType.RELOAD, EventSource.MANUAL, int(time.time())
                )
                print("✓ Recorded Manual Reload event")

        print("\n" + "=" * 70)
        print("RELOAD COMPLETED")
        print("=" * 70)
        return failures
    finally:
        await pool.close()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Reload registered players' match history from OpenDota",
    )
    parser.add_argument(
        "--server-id",
        type=int,
        default=None,
        help="Only reload players of this Discord server. Default: every registered server."
    )
    parser.add_argument(
        "--no-event",
        action="store_true",
        default=False,
        help="Do not record a Manual Reload event (the scheduler will not see this reload)."
    )
    parser.add_argument(
        "--init-schema",
        action="store_true",
        default=False,
        help="Create the dotaboard schema and tables before reloading."
    )
    args = parser.parse_args()

    failures = asyncio.run(run_reload(args.server_id, not args.no_event, args.init_schema))
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()

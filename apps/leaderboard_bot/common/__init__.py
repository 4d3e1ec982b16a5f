"""
Common utilities module for the leaderboard bot.

This module provides centralized access to shared functionality:
- Database pool
- Stored match source
- Command logging
- Command decorators
"""

from apps.leaderboard_bot.common.database import (
    get_db_pool,
    close_db_pool,
)

from apps.leaderboard_bot.common.player_matches import DatabaseMatchSource

from apps.leaderboard_bot.common.logging import (
    log_command_data,
    log_command_completion,
    get_command_latency_ms,
)

from apps.leaderboard_bot.common.decorators import (
    command_wrapper,
    handle_command_errors,
)

__all__ = [
    'get_db_pool',
    'close_db_pool',
    'DatabaseMatchSource',
    'log_command_data',
    'log_command_completion',
    'get_command_latency_ms',
    'command_wrapper',
    'handle_command_errors',
]

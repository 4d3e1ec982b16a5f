"""
Commands module for the leaderboard bot.
"""

from apps.leaderboard_bot.commands.leaderboard import setup_leaderboard_command
from apps.leaderboard_bot.commands.server_admin import setup_server_commands

__all__ = ['setup_leaderboard_command', 'setup_server_commands']

"""
Dota 2 leaderboard Discord bot.

This package provides the slash commands and the schedule loop that
publishes weekly and monthly leaderboards to registered servers.
"""

def main():
    """Main entry point for the Discord bot."""
    from apps.leaderboard_bot.stats_bot import main as _main
    _main()

__all__ = ['main']

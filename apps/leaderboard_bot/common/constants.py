"""
Constants used across the leaderboard bot.
"""

# =============================================================================
# Discord Limits
# =============================================================================

DISCORD_MESSAGE_MAX_LENGTH = 2000

# Players registered on one server; each is reloaded from OpenDota in turn
DEFAULT_MAX_PLAYERS_PER_SERVER = 25

# =============================================================================
# Command Replies
# =============================================================================

NOT_REGISTERED_MESSAGE = "❌ This server is not registered for leaderboards. Run `/register` first."

# =============================================================================
# Leaderboard Formatting
# =============================================================================

# e.g. "Fri, 29-Mar-24"
SECTION_DATE_FORMAT = "%a, %d-%b-%y"

VICTORY_LABEL = "Win"
DEFEAT_LABEL = "Loss"

# (left, right) emoji framing each category title
CATEGORY_EMOJIS = {
    "overall_win_rate": ("🏆", "🧙"),
    "ranked_win_rate": ("👀", "💎"),
    "hero_spam": ("🐸", "🤢"),
    "most_kills": ("😈", "⚔️"),
    "most_assists": ("🎁", "🤝"),
    "most_deaths": ("💩", "🆘"),
    "longest_match": ("😵", "⏳"),
}

# =============================================================================
# Schedule Defaults
# =============================================================================

DEFAULT_TICK_INTERVAL_MINUTES = 5
DEFAULT_RELOAD_INTERVAL_MINUTES = 180
WEEKLY_MIN_ELAPSED_SECONDS = 7 * 24 * 60 * 60
# TODO: Nth-weekday dates can be 28 days apart, which this gap skips; compare calendar months instead
MONTHLY_MIN_ELAPSED_SECONDS = 30 * 24 * 60 * 60

# Monthly "week" value meaning the last occurrence of the weekday in the month
LAST_WEEK_OF_MONTH = 5

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Worked-hours boundaries for check-out status, lower bound inclusive:
# < HALF_DAY_HOURS partial-present, < FULL_DAY_HOURS half-day, else present.
HALF_DAY_HOURS = 4.0
FULL_DAY_HOURS = 8.0

DEFAULT_TOKEN_TTL_MINUTES = 24 * 60
DEFAULT_DB_CONNECT_TIMEOUT = 10
MIN_PASSWORD_LENGTH = 6
HOURS_PRECISION = 2

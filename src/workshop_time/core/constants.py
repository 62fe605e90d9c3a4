"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
READ_RETRY_ATTEMPTS = 1
PERCENT_DECIMALS = 2
# Orders in these states accept new work sessions.
ACTIVE_ORDER_STATUSES = ("created", "in_progress")

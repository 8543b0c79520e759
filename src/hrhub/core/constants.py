"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from calendar import FRIDAY, SATURDAY

# Bangladesh weekend.
WEEKEND_DAYS = frozenset({FRIDAY, SATURDAY})

BACKDATE_LIMIT_DAYS = 7

# MySQL error codes surfaced as retryable conflicts.
MYSQL_LOCK_WAIT_TIMEOUT = 1205
MYSQL_DEADLOCK = 1213

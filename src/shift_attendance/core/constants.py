"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# UTC+5, no daylight saving.
DEFAULT_UTC_OFFSET_MINUTES = 300
MAX_UTC_OFFSET_MINUTES = 14 * 60

# datetime.weekday() numbering, 0 = Monday.
DEFAULT_WEEK_START = 0

DEFAULT_HISTORY_LIMIT = 30
MAX_HISTORY_LIMIT = 500

HOURS_DISPLAY_QUANTUM = "0.1"

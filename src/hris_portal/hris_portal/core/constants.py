"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DEFAULT_HISTORY_DAYS = 10
DEFAULT_ACTIVITY_LIMIT = 10
DEFAULT_FEED_LIMIT = 20
REPORT_LOG_LIMIT = 1000
MIN_PASSWORD_LENGTH = 6

UNKNOWN_NAME = "Unknown"
UNKNOWN_EMPLOYEE_ID = "N/A"

REPORT_CSV_HEADER = ("Log Date", "Employee Name", "Time In", "Time Out")
DEFAULT_SESSION_DAYS = 7

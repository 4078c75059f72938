"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# A standard working day; anything beyond counts as overtime
STANDARD_WORKDAY_MINUTES = 480
# Punches before this local hour belong to the previous work day
WORKDAY_ROLLOVER_HOUR = 5

DEFAULT_GEOFENCE_RADIUS_METERS = 100
EARTH_RADIUS_METERS = 6371e3

DEFAULT_AUTO_PUNCHOUT_MAX_MINUTES = 480
DEFAULT_AUTO_PUNCHOUT_MARGIN_BEFORE = 15
DEFAULT_AUTO_PUNCHOUT_MARGIN_AFTER = 30

DEFAULT_SCHEDULE_COLOR = "#3B82F6"
DEFAULT_BREAK_TYPE_COLOR = "#F59E0B"

DEFAULT_VACATION_POLICY_NAME = "Default policy"
DEFAULT_VACATION_DAYS = 22
DEFAULT_MAX_CARRY_OVER_DAYS = 5
DEFAULT_MIN_NOTICE_DAYS = 7

DEFAULT_UTC_OFFSET_MINUTES = 60
DEFAULT_REPORT_MAX_DAYS = 366

# Local hours that decide how a clock-in is matched against overnight shifts
NIGHT_SHIFT_EVENING_HOUR = 22
NIGHT_SHIFT_MORNING_HOUR = 6

PEAK_DAYS_LIMIT = 5
TREND_THRESHOLD_PERCENT = 5.0
UNSCHEDULED_LABEL = "Unscheduled"

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

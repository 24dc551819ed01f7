"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

STANDARD_SHIFT_FLOOR_HOURS = 8.0
MONTHLY_SALARY_DAYS = 30
MONTHLY_SALARY_HOURS_PER_DAY = 8

DEFAULT_OVERTIME_CUTOFF = "18:00"

ATTENDANCE_SCORE_MAX = 40.0
PERFORMANCE_SCORE_MAX = 40.0
BONUS_SCORE_MAX = 20.0
TOTAL_SCORE_MAX = 100.0

# (min average hours per day, points) checked top-down
PERFORMANCE_TIERS = (
    (9.0, 40.0),
    (8.0, 80.0 / 3),
    (0.0, 40.0 / 3),
)

DEFAULT_EXCLUDED_ROLE_KEYWORDS = ("dev",)

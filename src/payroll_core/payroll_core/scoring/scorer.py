from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    ATTENDANCE_SCORE_MAX,
    BONUS_SCORE_MAX,
    PERFORMANCE_SCORE_MAX,
    PERFORMANCE_TIERS,
    TOTAL_SCORE_MAX,
)
from .model import AttendanceAggregate


@dataclass(frozen=True)
class ScoreParts:
    attendance: float
    performance: float
    bonus: float
    total: float


class PerformanceScorer:
    """Attendance (0-40) + performance (0-40) + bonus (0-20), capped at 100."""

    @staticmethod
    def attendance_score(agg: AttendanceAggregate) -> float:
        if agg.total_working_days <= 0:
            return 0.0
        return min(ATTENDANCE_SCORE_MAX, ATTENDANCE_SCORE_MAX * agg.present_days / agg.total_working_days)

    @staticmethod
    def performance_score(agg: AttendanceAggregate) -> float:
        if agg.present_days <= 0:
            return 0.0
        for min_hours, points in PERFORMANCE_TIERS:
            if agg.avg_hours_per_day >= min_hours:
                return min(PERFORMANCE_SCORE_MAX, points)
        return 0.0

    @staticmethod
    def bonus_score(agg: AttendanceAggregate) -> float:
        if agg.max_bonus_days <= 0:
            return 0.0
        return min(BONUS_SCORE_MAX, BONUS_SCORE_MAX * agg.bonus_days / agg.max_bonus_days)

    def score(self, agg: AttendanceAggregate) -> ScoreParts:
        attendance = self.attendance_score(agg)
        performance = self.performance_score(agg)
        bonus = self.bonus_score(agg)
        total = min(TOTAL_SCORE_MAX, attendance + performance + bonus)
        return ScoreParts(
            attendance=round(attendance, 2),
            performance=round(performance, 2),
            bonus=round(bonus, 2),
            total=round(total, 2),
        )

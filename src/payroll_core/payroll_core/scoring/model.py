from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AttendanceAggregate:
    present_days: int = 0
    total_working_days: int = 0
    absent_days: int = 0
    travel_days: int = 0
    total_hours: float = 0.0
    avg_hours_per_day: float = 0.0
    overtime_hours: float = 0.0
    bonus_days: int = 0
    max_bonus_days: int = 0

    @property
    def attendance_rate(self) -> float:
        if self.total_working_days <= 0:
            return 0.0
        return self.present_days / self.total_working_days


@dataclass(frozen=True)
class ScoreRecord:
    """Derived for a period on request. Never persisted."""

    employee_id: int
    period_start: date
    period_end: date
    attendance_score: float
    performance_score: float
    bonus_score: float
    total: float
    attendance_rate: float = 0.0
    total_hours: float = 0.0
    avg_hours_per_day: float = 0.0
    overtime_hours: float = 0.0
    present_days: int = 0
    absent_days: int = 0
    travel_days: int = 0
    name: str = ""
    role: str = ""

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "role": self.role,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "attendance_score": self.attendance_score,
            "performance_score": self.performance_score,
            "bonus_score": self.bonus_score,
            "total": self.total,
            "attendance_rate": self.attendance_rate,
            "total_hours": self.total_hours,
            "avg_hours_per_day": self.avg_hours_per_day,
            "overtime_hours": self.overtime_hours,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "travel_days": self.travel_days,
        }


@dataclass(frozen=True)
class Leaderboard:
    period_start: date
    period_end: date
    rows: tuple[ScoreRecord, ...] = ()
    top_eligible: Optional[ScoreRecord] = None

    def to_dict(self) -> dict:
        return {
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "rows": [r.to_dict() for r in self.rows],
            "top_eligible": self.top_eligible.to_dict() if self.top_eligible else None,
        }

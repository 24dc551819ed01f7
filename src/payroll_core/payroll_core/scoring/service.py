from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence

from ..bonus.model import BonusSettings
from ..common.validators import require_date_range
from ..core.exceptions import NotFound
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..timesheets.model import TimesheetEntry
from ..timesheets.repository import TimesheetRepository
from .aggregator import AttendanceAggregator
from .model import Leaderboard, ScoreRecord
from .scorer import PerformanceScorer

logger = logging.getLogger(__name__)


def is_excluded_role(role: str, keywords: Sequence[str]) -> bool:
    lowered = (role or "").lower()
    return any(k and k.lower() in lowered for k in keywords)


class ReportService:
    """Individual scores and the period leaderboard, computed from timesheets on request."""

    def __init__(
        self,
        employees: EmployeeRepository,
        timesheets: TimesheetRepository,
        aggregator: AttendanceAggregator,
        *,
        bonus_settings: Callable[[], BonusSettings],
        scorer: Optional[PerformanceScorer] = None,
        excluded_role_keywords: Sequence[str] = (),
    ):
        self._employees = employees
        self._timesheets = timesheets
        self._aggregator = aggregator
        self._bonus_settings = bonus_settings
        self._scorer = scorer or PerformanceScorer()
        self._excluded = tuple(excluded_role_keywords)

    def _record(
        self,
        employee: Employee,
        entries: Sequence[TimesheetEntry],
        start: date,
        end: date,
        settings: BonusSettings,
    ) -> ScoreRecord:
        agg = self._aggregator.aggregate(employee, entries, start, end, settings)
        parts = self._scorer.score(agg)
        return ScoreRecord(
            employee_id=employee.employee_id,
            period_start=start,
            period_end=end,
            attendance_score=parts.attendance,
            performance_score=parts.performance,
            bonus_score=parts.bonus,
            total=parts.total,
            attendance_rate=round(agg.attendance_rate * 100, 2),
            total_hours=agg.total_hours,
            avg_hours_per_day=agg.avg_hours_per_day,
            overtime_hours=agg.overtime_hours,
            present_days=agg.present_days,
            absent_days=agg.absent_days,
            travel_days=agg.travel_days,
            name=employee.name,
            role=employee.role,
        )

    def compute_score(self, employee_id: int, start: date, end: date) -> ScoreRecord:
        require_date_range(start, end)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFound(f"Employee {employee_id} not found")
        entries = self._timesheets.list_for_period(employee.employee_id, start, end)
        return self._record(employee, entries, start, end, self._bonus_settings())

    def compute_leaderboard(self, start: date, end: date) -> Leaderboard:
        require_date_range(start, end)
        employees = [e for e in self._employees.list_all(active_only=True) if e.is_active]
        settings = self._bonus_settings()

        by_employee: dict[int, list[TimesheetEntry]] = {e.employee_id: [] for e in employees}
        if employees:
            for entry in self._timesheets.list_for_employees(list(by_employee), start, end):
                by_employee.setdefault(entry.employee_id, []).append(entry)

        rows = [self._record(e, by_employee[e.employee_id], start, end, settings) for e in employees]
        rows.sort(key=lambda r: (-r.total, -r.attendance_score, r.employee_id))

        top = next((r for r in rows if not is_excluded_role(r.role, self._excluded)), None)
        if rows and top is None:
            logger.info("no eligible performer for %s..%s; every active role is excluded", start, end)
        return Leaderboard(period_start=start, period_end=end, rows=tuple(rows), top_eligible=top)

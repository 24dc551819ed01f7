from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import iter_days, parse_hhmm, parse_iso_date
from ..common.validators import require_date_range
from ..core.enums import DayType
from ..core.exceptions import FieldError, NotFound
from ..employees.repository import EmployeeRepository
from .model import SaveResult, TimesheetEntry, TimesheetInput
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)


class TimesheetService:
    def __init__(self, timesheets: TimesheetRepository, employees: EmployeeRepository):
        self._timesheets = timesheets
        self._employees = employees

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFound(f"Employee {employee_id} not found")

    def open_period(self, employee_id: int, start: date, end: date) -> int:
        """Pre-populate a New row for every calendar day of the period."""
        require_date_range(start, end)
        self._require_employee(employee_id)
        created = self._timesheets.create_blank(int(employee_id), iter_days(start, end))
        logger.info("opened period %s..%s for employee %s (%d new rows)", start, end, employee_id, created)
        return created

    def get_entry(self, employee_id: int, work_date: date) -> Optional[TimesheetEntry]:
        return self._timesheets.get(int(employee_id), work_date)

    def list_for_period(self, employee_id: int, start: date, end: date) -> Sequence[TimesheetEntry]:
        require_date_range(start, end)
        return self._timesheets.list_for_period(int(employee_id), start, end)

    def revisions(self, employee_id: int, work_date: date) -> Sequence[TimesheetEntry]:
        return self._timesheets.revisions(int(employee_id), work_date)

    @staticmethod
    def parse_row(employee_id: int, index: int, row: Mapping[str, Any]) -> tuple[Optional[TimesheetInput], list[FieldError]]:
        """Validate one submitted row field by field; never raises."""
        errors: list[FieldError] = []
        if not isinstance(row, Mapping):
            return None, [FieldError(index, "row", "Row must be an object")]

        work_date: Optional[date] = None
        raw_date = row.get("date")
        if isinstance(raw_date, date):
            work_date = raw_date
        elif not raw_date or not str(raw_date).strip():
            errors.append(FieldError(index, "date", "Date is required"))
        else:
            try:
                work_date = parse_iso_date(str(raw_date).strip())
            except ValueError:
                errors.append(FieldError(index, "date", "Date must be YYYY-MM-DD"))

        punches = {}
        for name in ("clock_in", "clock_out"):
            try:
                punches[name] = parse_hhmm(row.get(name))
            except ValueError:
                errors.append(FieldError(index, name, "Time must be HH:MM", work_date))

        break_minutes: Optional[int] = None
        raw_break = row.get("break_minutes")
        if raw_break not in (None, ""):
            try:
                break_minutes = int(raw_break)
                if break_minutes < 0:
                    errors.append(FieldError(index, "break_minutes", "Break cannot be negative", work_date))
            except (TypeError, ValueError):
                errors.append(FieldError(index, "break_minutes", "Break must be a whole number of minutes", work_date))

        day_type = DayType.WORK
        if row.get("day_type"):
            try:
                day_type = DayType(row["day_type"])
            except (TypeError, ValueError):
                errors.append(FieldError(index, "day_type", "Day type must be Work or Travel", work_date))

        if errors:
            return None, errors
        return (
            TimesheetInput(
                employee_id=int(employee_id),
                work_date=work_date,
                clock_in=punches["clock_in"],
                clock_out=punches["clock_out"],
                break_minutes=break_minutes,
                day_type=day_type,
            ),
            [],
        )

    def save_entries(self, employee_id: int, rows: Sequence[Mapping[str, Any]]) -> SaveResult:
        """Upsert each valid row on its own; invalid rows are reported, not written.

        Dates are independent of each other, so one bad row does not stop the batch.
        """
        self._require_employee(employee_id)

        saved: list[TimesheetEntry] = []
        errors: list[FieldError] = []
        seen: set[date] = set()

        for index, row in enumerate(rows):
            data, row_errors = self.parse_row(employee_id, index, row)
            if row_errors:
                errors.extend(row_errors)
                continue
            if data.work_date in seen:
                errors.append(FieldError(index, "date", "Date appears more than once in this batch", data.work_date))
                continue
            seen.add(data.work_date)
            saved.append(self._timesheets.upsert(data))

        if errors:
            logger.warning("timesheet save for employee %s: %d saved, %d field errors", employee_id, len(saved), len(errors))
        return SaveResult(saved=tuple(saved), errors=tuple(errors))

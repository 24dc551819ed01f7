from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import PayrollPeriodSummary

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_COLUMNS = {
    "employee_id": "Employee ID",
    "name": "Name",
    "period_start": "Period start",
    "period_end": "Period end",
    "working_days": "Working days",
    "billable_hours": "Billable hours",
    "overtime_hours": "Overtime hours",
    "hourly_rate": "Hourly rate",
    "gross_pay": "Gross pay",
    "loan_deduction": "Loan",
    "advance_deduction": "Advance",
    "manual_deduction": "Manual",
    "total_deductions": "Total deductions",
    "net_pay": "Net pay",
    "status": "Status",
}


def summaries_frame(rows: Sequence[tuple[str, PayrollPeriodSummary]]) -> pd.DataFrame:
    """One row per (employee name, summary) pair, in the given order."""
    data = []
    for name, s in rows:
        data.append(
            {
                "employee_id": s.employee_id,
                "name": name,
                "period_start": s.period_start.isoformat(),
                "period_end": s.period_end.isoformat(),
                "working_days": s.working_days,
                "billable_hours": round(s.billable_minutes / 60, 2),
                "overtime_hours": round(s.overtime_minutes / 60, 2),
                "hourly_rate": round(s.hourly_rate, 2),
                "gross_pay": s.gross_pay,
                "loan_deduction": s.loan_deduction,
                "advance_deduction": s.advance_deduction,
                "manual_deduction": s.manual_deduction,
                "total_deductions": s.total_deductions,
                "net_pay": s.net_pay,
                "status": s.status.value,
            }
        )
    return pd.DataFrame(data, columns=list(_COLUMNS)).rename(columns=_COLUMNS)


def write_workbook(frame: pd.DataFrame, *, sheet_name: str = "Payroll") -> io.BytesIO:
    # Built in memory; callers stream it straight to the client.
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=sheet_name)
    output.seek(0)
    return output

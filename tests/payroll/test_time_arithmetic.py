from datetime import time

from src.payroll_core.payroll_core.employees.model import Employee
from src.payroll_core.payroll_core.payroll.time_arithmetic import (
    billable_minutes,
    shift_duration_minutes,
    split_regular_overtime,
    standard_shift_hours,
)


def test_overnight_shift_is_eight_hours_not_negative():
    assert shift_duration_minutes(time(22, 0), time(6, 0)) == 480


def test_day_shift_duration():
    assert shift_duration_minutes(time(9, 0), time(18, 0)) == 540


def test_billable_minutes_never_negative():
    assert billable_minutes(540, 60) == 480
    assert billable_minutes(30, 60) == 0
    assert billable_minutes(300, None) == 300


def test_standard_shift_hours_from_configured_shift():
    emp = Employee(employee_id=1, name="A", shift_start=time(9, 0), shift_end=time(18, 0), break_minutes=60)
    assert standard_shift_hours(emp) == 8.0


def test_standard_shift_hours_short_shift_is_kept():
    emp = Employee(employee_id=1, name="A", shift_start=time(10, 0), shift_end=time(14, 0))
    assert standard_shift_hours(emp) == 4.0


def test_standard_shift_hours_falls_back_to_eight():
    missing = Employee(employee_id=1, name="A")
    all_break = Employee(employee_id=2, name="B", shift_start=time(9, 0), shift_end=time(10, 0), break_minutes=90)
    assert standard_shift_hours(missing) == 8.0
    assert standard_shift_hours(all_break) == 8.0


def test_split_takes_break_from_regular_time():
    split = split_regular_overtime(time(9, 0), time(20, 0), 60, cutoff_minute=18 * 60)
    assert (split.regular, split.overtime) == (480, 120)
    assert split.billable == 600


def test_split_break_spills_into_overtime():
    split = split_regular_overtime(time(17, 0), time(20, 0), 90, cutoff_minute=18 * 60)
    assert (split.regular, split.overtime) == (0, 90)


def test_split_overnight_with_cutoff_after_midnight():
    # 02:00 next day on the shift's axis
    split = split_regular_overtime(time(22, 0), time(6, 0), 0, cutoff_minute=26 * 60)
    assert (split.regular, split.overtime) == (240, 240)


def test_split_ends_before_cutoff():
    split = split_regular_overtime(time(9, 0), time(13, 0), None, cutoff_minute=18 * 60)
    assert (split.regular, split.overtime) == (240, 0)

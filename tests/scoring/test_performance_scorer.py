from datetime import date, time

import pytest

from src.payroll_core.payroll_core.bonus.model import BonusSettings
from src.payroll_core.payroll_core.core.enums import DayType
from src.payroll_core.payroll_core.payroll.calculator.earnings import EarningsCalculator
from src.payroll_core.payroll_core.scoring.aggregator import AttendanceAggregator
from src.payroll_core.payroll_core.scoring.model import AttendanceAggregate
from src.payroll_core.payroll_core.scoring.scorer import PerformanceScorer
from tests.fakes import DEFAULT_BONUS, InMemoryTimesheets, make_employee

MONDAY = date(2025, 6, 2)
SUNDAY = date(2025, 6, 8)


def test_perfect_period_scores_one_hundred():
    agg = AttendanceAggregate(present_days=20, total_working_days=20, avg_hours_per_day=9.5, bonus_days=20, max_bonus_days=20)
    parts = PerformanceScorer().score(agg)

    assert (parts.attendance, parts.performance, parts.bonus, parts.total) == (40.0, 40.0, 20.0, 100.0)


@pytest.mark.parametrize("avg,expected", [(9.0, 40.0), (8.5, 26.67), (8.0, 26.67), (7.99, 13.33)])
def test_performance_tiers(avg, expected):
    agg = AttendanceAggregate(present_days=5, total_working_days=5, avg_hours_per_day=avg)
    assert PerformanceScorer().score(agg).performance == expected


def test_no_present_days_scores_zero_performance():
    agg = AttendanceAggregate(present_days=0, total_working_days=5)
    parts = PerformanceScorer().score(agg)

    assert parts.performance == 0.0
    assert parts.attendance == 0.0


def test_empty_period_and_bonus_window_score_zero():
    parts = PerformanceScorer().score(AttendanceAggregate())
    assert (parts.attendance, parts.bonus, parts.total) == (0.0, 0.0, 0.0)


def test_attendance_is_proportional_and_capped():
    half = AttendanceAggregate(present_days=3, total_working_days=6, avg_hours_per_day=8)
    extra = AttendanceAggregate(present_days=7, total_working_days=6, avg_hours_per_day=8)

    assert PerformanceScorer().score(half).attendance == 20.0
    assert PerformanceScorer().score(extra).attendance == 40.0


def test_aggregate_week_of_timesheets():
    emp = make_employee(1)
    repo = InMemoryTimesheets()
    for offset in range(3):
        repo.add(1, date(2025, 6, 2 + offset), time(9, 0), time(18, 0))
    repo.add(1, date(2025, 6, 5), day_type=DayType.TRAVEL)
    repo.add(1, date(2025, 6, 6))

    agg = AttendanceAggregator(EarningsCalculator()).aggregate(
        emp, repo.list_for_period(1, MONDAY, SUNDAY), MONDAY, SUNDAY, DEFAULT_BONUS
    )

    assert agg.total_working_days == 6
    assert agg.present_days == 4
    assert agg.absent_days == 2
    assert agg.travel_days == 1
    assert agg.total_hours == 24.0
    assert agg.avg_hours_per_day == 6.0
    assert (agg.bonus_days, agg.max_bonus_days) == (4, 6)


def test_bonus_days_limited_to_window():
    emp = make_employee(1)
    repo = InMemoryTimesheets()
    for offset in range(5):
        repo.add(1, date(2025, 6, 2 + offset), time(9, 0), time(18, 0))
    window = BonusSettings(start_date=date(2025, 6, 4), end_date=date(2026, 3, 31), amount_per_day=35)

    agg = AttendanceAggregator(EarningsCalculator()).aggregate(
        emp, repo.list_for_period(1, MONDAY, SUNDAY), MONDAY, SUNDAY, window
    )

    assert (agg.bonus_days, agg.max_bonus_days) == (3, 4)

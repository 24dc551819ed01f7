from __future__ import annotations

from datetime import date

import pytest

from src.payroll_core.payroll_core.core.enums import DeductionStatus, DeductionType
from src.payroll_core.payroll_core.core.exceptions import InvalidAmount, NotFound, ValidationError
from src.payroll_core.payroll_core.deductions.model import Deduction, NewDeduction
from src.payroll_core.payroll_core.deductions.service import DeductionAggregator, DeductionService
from tests.fakes import InMemoryDeductions

START = date(2025, 6, 1)
END = date(2025, 6, 30)


def _deduction(deduction_id, deduction_type, amount, start=START, end=END, status=DeductionStatus.ACTIVE):
    return Deduction(
        deduction_id=deduction_id,
        employee_id=1,
        deduction_type=deduction_type,
        amount=amount,
        period_start=start,
        period_end=end,
        status=status,
    )


def test_net_pay_subtracts_each_type():
    rows = [
        _deduction(1, DeductionType.LOAN, 300),
        _deduction(2, DeductionType.ADVANCE, 200),
        _deduction(3, DeductionType.MANUAL, 100),
    ]
    net = DeductionAggregator().net(1000, rows, START, END)

    assert (net.loan, net.advance, net.manual) == (300.0, 200.0, 100.0)
    assert net.total == 600.0
    assert net.net_pay == 400.0
    assert net.warning is None


def test_over_deduction_floors_at_zero_with_warning():
    rows = [_deduction(1, DeductionType.LOAN, 500), _deduction(2, DeductionType.MANUAL, 300)]
    net = DeductionAggregator().net(500, rows, START, END)

    assert net.net_pay == 0.0
    assert net.warning is not None
    assert net.warning.shortfall == 300.0
    assert net.warning.to_dict()["code"] == "OverDeducted"


def test_deductions_outside_period_are_ignored():
    rows = [_deduction(1, DeductionType.LOAN, 500, start=date(2025, 5, 1), end=date(2025, 5, 31))]
    net = DeductionAggregator().net(1000, rows, START, END)

    assert net.net_pay == 1000.0


def test_parse_item_validates_type_and_amount():
    item = DeductionService.parse_item({"type": "Advance", "amount": "250", "reason": " fuel "})
    assert item == NewDeduction(DeductionType.ADVANCE, 250.0, "fuel")

    with pytest.raises(ValidationError):
        DeductionService.parse_item({"type": "bonus", "amount": 10})
    with pytest.raises(InvalidAmount):
        DeductionService.parse_item({"type": "loan", "amount": 0})


def test_replace_for_period_cancels_previous_rows():
    repo = InMemoryDeductions()
    svc = DeductionService(repo)
    svc.replace_for_period(1, START, END, [NewDeduction(DeductionType.LOAN, 500)])
    svc.replace_for_period(1, START, END, [NewDeduction(DeductionType.ADVANCE, 200), NewDeduction(DeductionType.MANUAL, 50)])

    active = svc.list_for_period(1, START, END)
    assert sorted(d.deduction_type.value for d in active) == ["advance", "manual"]
    assert repo.get(1).status == DeductionStatus.CANCELLED
    assert svc.net_for_period(1, 1000, START, END).net_pay == 750.0


def test_replace_for_period_cancels_sub_period_rows_only():
    repo = InMemoryDeductions()
    svc = DeductionService(repo)
    week = svc.add(1, date(2025, 6, 9), date(2025, 6, 15), NewDeduction(DeductionType.MANUAL, 120))
    spanning = svc.add(1, date(2025, 5, 26), date(2025, 6, 8), NewDeduction(DeductionType.MANUAL, 90))
    other = svc.add(2, START, END, NewDeduction(DeductionType.MANUAL, 40))

    svc.replace_for_period(1, START, END, [NewDeduction(DeductionType.ADVANCE, 200)])

    assert repo.get(week.deduction_id).status == DeductionStatus.CANCELLED
    assert repo.get(spanning.deduction_id).status == DeductionStatus.ACTIVE
    assert repo.get(other.deduction_id).status == DeductionStatus.ACTIVE
    assert [d.deduction_type for d in svc.list_for_period(1, START, END)] == [DeductionType.ADVANCE]


def test_cancel_transitions_once():
    repo = InMemoryDeductions()
    svc = DeductionService(repo)
    saved = svc.add(1, START, END, NewDeduction(DeductionType.MANUAL, 80))

    svc.cancel(saved.deduction_id)
    assert svc.list_for_period(1, START, END) == []

    with pytest.raises(ValidationError):
        svc.cancel(saved.deduction_id)
    with pytest.raises(NotFound):
        svc.cancel(999)


def test_reversed_period_rejected():
    svc = DeductionService(InMemoryDeductions())
    with pytest.raises(ValidationError):
        svc.list_for_period(1, END, START)

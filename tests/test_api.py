from __future__ import annotations

from datetime import date, time

import pytest

from src.payroll_core.payroll_core.main import create_app
from tests.fakes import FakeStore, make_employee


@pytest.fixture
def store():
    return FakeStore(make_employee(1, name="Asha"), make_employee(2, name="Karan", role="Developer"))


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=store.container())
    return app.test_client()


def test_timesheet_put_then_get(client):
    resp = client.put(
        "/api/timesheets/1",
        json={"entries": [{"date": "2025-06-02", "clock_in": "09:00", "clock_out": "18:00"}]},
    )
    assert resp.status_code == 200
    assert resp.get_json()["saved"][0]["status"] == "Active"

    resp = client.get("/api/timesheets/1?start=2025-06-01&end=2025-06-30")
    entries = resp.get_json()["entries"]
    assert [(e["date"], e["clock_in"], e["clock_out"]) for e in entries] == [("2025-06-02", "09:00", "18:00")]


def test_timesheet_field_errors(client):
    resp = client.put("/api/timesheets/1", json={"entries": [{"date": "2025-06-02", "clock_in": "9am"}]})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["errors"] == [{"row": 0, "field": "clock_in", "message": "Time must be HH:MM", "date": "2025-06-02"}]


def test_timesheet_numeric_punch_is_field_error(client):
    resp = client.put(
        "/api/timesheets/1",
        json={"entries": [{"date": "2025-06-02", "clock_in": "09:00"}, {"date": "2025-06-03", "clock_in": 900}]},
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert [s["date"] for s in body["saved"]] == ["2025-06-02"]
    assert [(e["row"], e["field"]) for e in body["errors"]] == [(1, "clock_in")]


def test_open_period(client, store):
    resp = client.post("/api/timesheets/1/open-period", json={"start": "2025-06-01", "end": "2025-06-03"})

    assert resp.status_code == 201
    assert resp.get_json()["created"] == 3


def test_missing_period_is_bad_request(client):
    resp = client.get("/api/timesheets/1?start=2025-06-01")
    assert resp.status_code == 400
    assert "end" in resp.get_json()["message"]


def test_withdrawal_over_balance_conflicts(client, store):
    store.container().bonus_ledger.accrue(1, 50, date(2025, 6, 30), source_key="seed")

    resp = client.post("/api/bonus/1/withdrawals", json={"amount": 80, "date": "2025-07-01"})
    assert resp.status_code == 409
    assert resp.get_json()["balance"] == 50.0

    resp = client.post("/api/bonus/1/withdrawals", json={"amount": 50, "date": "2025-07-01", "notes": "cash"})
    assert resp.status_code == 201
    assert resp.get_json()["balance"] == 0.0


def test_withdrawal_invalid_amount(client):
    resp = client.post("/api/bonus/1/withdrawals", json={"amount": 0})
    assert resp.status_code == 400


def test_withdrawal_unknown_employee(client):
    resp = client.post("/api/bonus/99/withdrawals", json={"amount": 10})
    assert resp.status_code == 404


def test_bonus_settings_roundtrip(client):
    resp = client.put(
        "/api/settings/bonus",
        json={"start_date": "2026-04-01", "end_date": "2027-03-31", "amount_per_day": 40},
    )
    assert resp.status_code == 200

    settings = client.get("/api/settings/bonus").get_json()["settings"]
    assert settings == {"start_date": "2026-04-01", "end_date": "2027-03-31", "amount_per_day": 40.0}


def test_loan_issue_and_close(client):
    resp = client.post("/api/loans/1", json={"amount": 5000, "date": "2025-01-05"})
    loan = resp.get_json()["loan"]
    assert resp.status_code == 200

    assert client.get("/api/loans/1/active").get_json()["loan"]["loan_id"] == loan["loan_id"]
    assert client.post(f"/api/loans/{loan['loan_id']}/close").status_code == 200
    assert client.post(f"/api/loans/{loan['loan_id']}/close").status_code == 400
    assert client.get("/api/loans/1/active").get_json()["loan"] is None


def test_loan_errors(client):
    assert client.post("/api/loans/1", json={"amount": -1}).status_code == 400
    assert client.post("/api/loans/404/close").status_code == 404


def test_deductions_and_payroll_summary(client, store):
    store.timesheets.add(1, date(2025, 6, 2), time(9, 0), time(18, 0))

    resp = client.put(
        "/api/deductions/1",
        json={"start": "2025-06-01", "end": "2025-06-30", "items": [{"type": "manual", "amount": 1000, "description": "uniform"}]},
    )
    assert resp.status_code == 200

    body = client.get("/api/payroll/summary?employee_id=1&start=2025-06-01&end=2025-06-30").get_json()
    assert body["summary"]["gross_pay"] == 800.0
    assert body["summary"]["net_pay"] == 0.0
    assert body["summary"]["warnings"][0]["shortfall"] == 200.0
    assert body["days"][0]["amount"] == 800.0


def test_mark_paid_defaults_to_active_employees(client):
    resp = client.post("/api/payroll/mark-paid", json={"start": "2025-06-01", "end": "2025-06-30"})

    summaries = resp.get_json()["summaries"]
    assert [s["employee_id"] for s in summaries] == [1, 2]
    assert {s["status"] for s in summaries} == {"Paid"}


def test_export_sends_workbook(client):
    resp = client.get("/api/payroll/export?start=2025-06-01&end=2025-06-30")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert resp.data[:2] == b"PK"


def test_leaderboard_winner_excludes_developers(client, store):
    for day in (2, 3, 4):
        store.timesheets.add(2, date(2025, 6, day), time(9, 0), time(19, 0))
    store.timesheets.add(1, date(2025, 6, 2), time(9, 0), time(18, 0))

    body = client.get("/api/reports/leaderboard?start=2025-06-02&end=2025-06-07").get_json()

    assert [r["employee_id"] for r in body["rows"]] == [2, 1]
    assert body["top_eligible"]["employee_id"] == 1


def test_score_requires_employee_id(client):
    assert client.get("/api/reports/score?start=2025-06-02&end=2025-06-07").status_code == 400


def test_summary_get_previews_and_post_stores(client, store):
    store.timesheets.add(1, date(2025, 6, 2), time(9, 0), time(18, 0))

    preview = client.get("/api/payroll/summary?employee_id=1&start=2025-06-01&end=2025-06-30")
    assert preview.status_code == 200
    assert preview.get_json()["summary"]["gross_pay"] == 800.0
    assert store.payroll.rows == {}

    saved = client.post("/api/payroll/summary", json={"employee_id": 1, "start": "2025-06-01", "end": "2025-06-30"})
    assert saved.status_code == 200
    assert store.payroll.get(1, date(2025, 6, 1), date(2025, 6, 30)).gross_pay == 800.0

"""Example: use the service layer directly (no Flask).

Controllers stay thin; every payroll rule lives in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.payroll_core.payroll_core.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        default_bonus_settings=settings.DEFAULT_BONUS_SETTINGS,
        excluded_role_keywords=settings.EXCLUDED_ROLE_KEYWORDS,
    )
    start, end = date(2025, 6, 1), date(2025, 6, 30)

    summary = container.payroll_service.compute_period_summary(1, start, end)
    print(summary.to_dict())

    board = container.report_service.compute_leaderboard(start, end)
    for row in board.rows:
        print(f"{row.employee_id:>4} {row.name:<20} {row.total:6.2f}")
    if board.top_eligible:
        print("Top performer:", board.top_eligible.name)


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .bonus.model import BonusSettings
from .bonus.mysql_bonus_repository import MySQLBonusRepository
from .bonus.repository import BonusRepository
from .bonus.service import BonusLedger
from .core.constants import DEFAULT_EXCLUDED_ROLE_KEYWORDS
from .database.connection import DBConfig, DatabaseConnection
from .deductions.mysql_deduction_repository import MySQLDeductionRepository
from .deductions.repository import DeductionRepository
from .deductions.service import DeductionAggregator, DeductionService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .loans.mysql_loan_repository import MySQLLoanRepository
from .loans.repository import LoanRepository
from .loans.service import LoanLedger
from .payroll.calculator.earnings import EarningsCalculator
from .payroll.calculator.factory import RateStrategyFactory
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .scoring.aggregator import AttendanceAggregator
from .scoring.service import ReportService
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    timesheets_repo: TimesheetRepository
    bonus_repo: BonusRepository
    loans_repo: LoanRepository
    deductions_repo: DeductionRepository
    payroll_repo: PayrollRepository

    calculator: EarningsCalculator
    timesheet_service: TimesheetService
    bonus_ledger: BonusLedger
    loan_ledger: LoanLedger
    deduction_service: DeductionService
    payroll_service: PayrollService
    report_service: ReportService


def assemble_container(
    *,
    employees_repo: EmployeeRepository,
    timesheets_repo: TimesheetRepository,
    bonus_repo: BonusRepository,
    loans_repo: LoanRepository,
    deductions_repo: DeductionRepository,
    payroll_repo: PayrollRepository,
    default_bonus_settings: BonusSettings,
    excluded_role_keywords: Sequence[str] = DEFAULT_EXCLUDED_ROLE_KEYWORDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    calculator = EarningsCalculator(factory=RateStrategyFactory())
    aggregator = AttendanceAggregator(calculator)

    timesheet_service = TimesheetService(timesheets_repo, employees_repo)
    bonus_ledger = BonusLedger(bonus_repo, default_settings=default_bonus_settings)
    loan_ledger = LoanLedger(loans_repo, deductions_repo)
    deduction_service = DeductionService(deductions_repo, aggregator=DeductionAggregator())
    payroll_service = PayrollService(
        employees_repo,
        timesheets_repo,
        payroll_repo,
        calculator=calculator,
        deductions=deduction_service,
        bonus=bonus_ledger,
        aggregator=aggregator,
    )
    report_service = ReportService(
        employees_repo,
        timesheets_repo,
        aggregator,
        bonus_settings=bonus_ledger.get_settings,
        excluded_role_keywords=excluded_role_keywords,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        timesheets_repo=timesheets_repo,
        bonus_repo=bonus_repo,
        loans_repo=loans_repo,
        deductions_repo=deductions_repo,
        payroll_repo=payroll_repo,
        calculator=calculator,
        timesheet_service=timesheet_service,
        bonus_ledger=bonus_ledger,
        loan_ledger=loan_ledger,
        deduction_service=deduction_service,
        payroll_service=payroll_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    default_bonus_settings: dict,
    excluded_role_keywords: Sequence[str] = DEFAULT_EXCLUDED_ROLE_KEYWORDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble_container(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        bonus_repo=MySQLBonusRepository(conn),
        loans_repo=MySQLLoanRepository(conn),
        deductions_repo=MySQLDeductionRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        default_bonus_settings=BonusSettings.from_dict(default_bonus_settings),
        excluded_role_keywords=excluded_role_keywords,
    )

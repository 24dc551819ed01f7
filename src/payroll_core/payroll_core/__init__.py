"""Payroll core package.

Feature modules (timesheets, payroll, bonus, loans, deductions, scoring, ...)
sit behind a thin Flask controller layer and service/repository layers.
"""

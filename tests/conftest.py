"""Shared loan fixtures.

Fixture: $15K tuition + $8K living expenses, 5.5% APR, 10 years,
6-month compound grace period starting January 2025, no extra payments.
"""

from datetime import date

import pytest

from student_loan_calc.data_models import LoanFormValues


@pytest.fixture
def canonical_values() -> LoanFormValues:
    """The default form scenario without part-time income or boosts."""
    return LoanFormValues(
        tuition=15000.0,
        living_expenses=8000.0,
        interest_rate=5.5,
        loan_term_years=10.0,
        grace_period_months=6,
        start_date=date(2025, 1, 1),
        currency="USD",
        part_time_income=0.0,
        early_repayment_rate=0.0,
        interest_type="compound",
    )


@pytest.fixture
def grace_values() -> LoanFormValues:
    """$10K at 12% APR with a 2-month grace period (1% per month)."""
    return LoanFormValues(
        tuition=10000.0,
        living_expenses=0.0,
        interest_rate=12.0,
        loan_term_years=5.0,
        grace_period_months=2,
        start_date="2025-09-01",
    )

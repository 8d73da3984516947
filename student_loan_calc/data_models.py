"""Data models for the student loan calculator.

This module defines the dataclasses exchanged with the calculation engine:
the form values collected from the user, one row of the month-by-month
schedule, the grace-period impact summary and the overall metrics returned
by :func:`student_loan_calc.engine.calculate_loan_metrics`. Output records
are frozen so a computed result can be shared between the chart, the summary
cards and any exporter without being modified along the way.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Tuple, Union

CURRENCIES = ("USD", "INR", "EUR", "GBP")

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
}

INTEREST_TYPES = ("compound", "simple")

# Upper bound of the early repayment boost slider (+50 % of the base payment)
MAX_EARLY_REPAYMENT_RATE = 0.5

# Longest schedule the form accepts
MAX_LOAN_TERM_YEARS = 50
MAX_GRACE_PERIOD_MONTHS = 120


@dataclass(frozen=True)
class LoanFormValues:
    """Loan inputs as collected by the form.

    Attributes
    ----------
    tuition: float
        Tuition amount financed by the loan.
    living_expenses: float
        Living expenses financed by the loan.
    interest_rate: float
        Annual nominal interest rate in percent (``5.5`` means 5.5 %).
    loan_term_years: float
        Repayment term in years; fractional years are allowed.
    grace_period_months: int
        Months before repayment begins, during which interest accrues.
    start_date: date or str
        First month of the schedule. Strings in ``YYYY-MM-DD`` or ``YYYY-MM``
        form are accepted; anything unparseable falls back to today.
    currency: str
        One of :data:`CURRENCIES`. Display only.
    part_time_income: float
        Amount applied every month as an extra principal payment.
    early_repayment_rate: float
        Fraction of the base payment added as extra principal (0 - 0.5).
    interest_type: str
        ``"compound"`` capitalizes grace-period interest monthly,
        ``"simple"`` accrues it on the original principal only.
    """

    tuition: float
    living_expenses: float
    interest_rate: float
    loan_term_years: float
    grace_period_months: int = 0
    start_date: Union[date, str] = ""
    currency: str = "USD"
    part_time_income: float = 0.0
    early_repayment_rate: float = 0.0
    interest_type: str = "compound"

    @property
    def principal(self) -> float:
        """Total amount borrowed (negative components count as zero)."""
        return max(0.0, self.tuition) + max(0.0, self.living_expenses)


@dataclass(frozen=True)
class PaymentBreakdown:
    """One month of the schedule.

    Grace-period months are recorded too, with ``principal_paid`` equal to
    zero, so the timeline stays continuous.
    """

    month_index: int
    label: str
    principal_paid: float
    interest_paid: float
    remaining_balance: float


@dataclass(frozen=True)
class GraceImpact:
    """How much the grace period adds to the cost of the loan."""

    interest_accrued_during_grace: float
    added_interest_from_grace: float
    total_interest_without_grace: float
    months_with_grace: int


@dataclass(frozen=True)
class LoanMetrics:
    """Result of a single calculation.

    ``monthly_payment`` is the base amortized payment after the grace period
    and excludes extra payments. ``total_repayment`` and ``total_interest``
    describe the primary (grace-adjusted) scenario; ``alternative_schedule``
    is the same loan repaid without a grace period, kept for comparison.
    """

    monthly_payment: float
    total_repayment: float
    total_interest: float
    schedule: Tuple[PaymentBreakdown, ...]
    alternative_schedule: Tuple[PaymentBreakdown, ...]
    grace_impact: GraceImpact

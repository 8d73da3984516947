"""Core calculation engine for the student loan calculator.

This module turns a set of :class:`LoanFormValues` into a month-by-month
schedule and summary metrics. Interest accrues during an optional grace
period (capitalized monthly for compound loans, on the original principal for
simple loans), after which the balance is repaid with a fixed annuity payment
plus optional extra principal payments. The same loan repaid without a grace
period is computed alongside so the cost of the grace period can be shown.

The engine never raises on numeric edge cases: negative amounts are treated
as zero, terms shorter than a month become one month and a zero interest
rate falls back to straight-line repayment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from .data_models import GraceImpact, LoanFormValues, LoanMetrics, PaymentBreakdown
from .utils import format_month_label, parse_start_date, round_half_up

logger = logging.getLogger(__name__)

# A balance at or below this amount is treated as fully repaid
PAID_OFF_THRESHOLD = 0.01


@dataclass(frozen=True)
class AmortizationResult:
    """Rows and totals produced by :func:`build_amortization_schedule`."""

    schedule: List[PaymentBreakdown]
    total_interest: float
    total_paid: float


def annuity_payment(balance: float, monthly_rate: float, months: int) -> float:
    """Return the fixed monthly payment that repays ``balance`` in ``months``.

    The formula is:

        payment = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the balance, ``i`` the monthly rate and ``n`` the number of
    payments. When the rate is zero the payment simplifies to ``P / n``. When
    ``(1 + i)^n`` exceeds the float range the payment is interest only,
    ``P * i``, the limit of the formula for large ``n``.
    """
    if monthly_rate > 0:
        try:
            factor = (1 + monthly_rate) ** months
        except OverflowError:
            return balance * monthly_rate
        return balance * monthly_rate * factor / (factor - 1)
    return balance / months


def build_amortization_schedule(
    starting_balance: float,
    months: int,
    monthly_rate: float,
    base_payment: float,
    extra_payment: float,
    base_date: date,
    start_offset: int,
) -> AmortizationResult:
    """Repay ``starting_balance`` month by month.

    Parameters
    ----------
    starting_balance: float
        Balance at the start of repayment.
    months: int
        Maximum number of payments.
    monthly_rate: float
        Monthly interest rate as a fraction.
    base_payment: float
        Fixed monthly payment covering interest and principal.
    extra_payment: float
        Additional principal paid every month on top of ``base_payment``.
    base_date: date
        Date of month index 0, used for row labels.
    start_offset: int
        Month index of the first row, so repayment rows can follow grace rows.

    Returns
    -------
    AmortizationResult
        The emitted rows, the interest paid and the total amount paid
        (principal plus interest). The schedule stops early once the balance
        is repaid; the final balance is then exactly zero.
    """
    schedule: List[PaymentBreakdown] = []
    balance = starting_balance
    total_interest = 0.0
    total_paid = 0.0

    for i in range(months):
        if balance <= 0:
            break
        interest = balance * monthly_rate if monthly_rate > 0 else 0.0
        principal_paid = min(balance, max(base_payment - interest, 0.0))
        payment = principal_paid + interest

        remaining = balance - principal_paid
        if extra_payment > 0 and remaining > 0:
            extra = min(extra_payment, remaining)
            principal_paid += extra
            payment += extra

        balance = max(0.0, balance - principal_paid)
        total_interest += interest
        total_paid += payment

        paid_off = balance <= PAID_OFF_THRESHOLD
        if paid_off:
            # floating point dust left after the last payment
            balance = 0.0

        schedule.append(
            PaymentBreakdown(
                month_index=start_offset + i,
                label=format_month_label(base_date, start_offset + i),
                principal_paid=principal_paid,
                interest_paid=interest,
                remaining_balance=balance,
            )
        )
        if paid_off:
            break

    return AmortizationResult(schedule=schedule, total_interest=total_interest, total_paid=total_paid)


def calculate_loan_metrics(values: LoanFormValues) -> LoanMetrics:
    """Compute the schedule and summary metrics for a student loan.

    Parameters
    ----------
    values: LoanFormValues
        Form values, already validated by the caller (see
        :mod:`student_loan_calc.validation`).

    Returns
    -------
    LoanMetrics
        Grace and repayment rows, the comparison schedule without a grace
        period and aggregate figures.
    """
    principal = values.principal
    total_months = max(1, round_half_up(values.loan_term_years * 12))
    monthly_rate = max(values.interest_rate, 0) / 100 / 12
    base_date = parse_start_date(values.start_date)
    grace_months = max(0, int(values.grace_period_months))
    compound = values.interest_type == "compound"

    logger.debug(
        "Calculating loan: principal=%.2f months=%d rate=%.6f grace=%d type=%s",
        principal,
        total_months,
        monthly_rate,
        grace_months,
        values.interest_type,
    )

    balance = principal
    total_interest = 0.0
    accrued_simple_interest = 0.0
    grace_rows: List[PaymentBreakdown] = []

    # Grace period: interest accrues, nothing is repaid
    for i in range(grace_months):
        interest_base = balance if compound else principal
        interest = interest_base * monthly_rate if monthly_rate > 0 else 0.0
        total_interest += interest
        if compound:
            balance += interest
        else:
            accrued_simple_interest += interest
        grace_rows.append(
            PaymentBreakdown(
                month_index=i,
                label=format_month_label(base_date, i),
                principal_paid=0.0,
                interest_paid=interest,
                remaining_balance=balance if compound else principal + accrued_simple_interest,
            )
        )

    if not compound:
        balance = principal + accrued_simple_interest

    monthly_payment = annuity_payment(balance, monthly_rate, total_months)
    extra_payment = _extra_payment(values, monthly_payment)
    repayment = build_amortization_schedule(
        balance,
        total_months,
        monthly_rate,
        monthly_payment,
        extra_payment,
        base_date,
        len(grace_rows),
    )
    total_interest += repayment.total_interest

    # Same loan repaid immediately, for comparison
    payment_no_grace = annuity_payment(principal, monthly_rate, total_months)
    alternative = build_amortization_schedule(
        principal,
        total_months,
        monthly_rate,
        payment_no_grace,
        _extra_payment(values, payment_no_grace),
        base_date,
        0,
    )

    if compound:
        interest_accrued_during_grace = balance - principal
    else:
        interest_accrued_during_grace = accrued_simple_interest

    grace_impact = GraceImpact(
        interest_accrued_during_grace=interest_accrued_during_grace,
        added_interest_from_grace=max(total_interest - alternative.total_interest, 0.0),
        total_interest_without_grace=alternative.total_interest,
        months_with_grace=grace_months,
    )

    logger.debug(
        "Loan calculated: payment=%.2f interest=%.2f rows=%d",
        monthly_payment,
        total_interest,
        len(grace_rows) + len(repayment.schedule),
    )

    return LoanMetrics(
        monthly_payment=monthly_payment,
        total_repayment=repayment.total_paid,
        total_interest=total_interest,
        schedule=tuple(grace_rows + repayment.schedule),
        alternative_schedule=tuple(alternative.schedule),
        grace_impact=grace_impact,
    )


def _extra_payment(values: LoanFormValues, base_payment: float) -> float:
    """Monthly extra principal: part-time income plus the early repayment boost."""
    return max(0.0, values.part_time_income) + max(0.0, values.early_repayment_rate) * base_payment

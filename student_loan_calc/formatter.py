"""Output helpers for the student loan calculator.

This module provides currency formatting and simple functions to render
metrics and schedules in a tabular text format. Formatting is cosmetic only:
callers keep the unrounded numbers returned by the engine.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import click

from .data_models import CURRENCY_SYMBOLS, LoanMetrics, PaymentBreakdown


def format_currency(value: float, currency: str = "USD") -> str:
    """Format ``value`` as a whole amount with a currency symbol.

    ``format_currency(23000.4, "GBP")`` gives ``"£23,000"``. Halves round away
    from zero and non-finite values are shown as zero.
    """
    if value is None or not math.isfinite(value):
        value = 0.0
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    amount = math.floor(abs(value) + 0.5)
    sign = "-" if value < 0 and amount else ""
    return f"{sign}{symbol}{amount:,}"


def print_summary(metrics: LoanMetrics, currency: str = "USD", principal: Optional[float] = None) -> None:
    """Print the summary cards and grace-period impact."""
    def fmt(value: float) -> str:
        return format_currency(value, currency)

    click.echo("Summary")
    click.echo("-" * 72)
    if principal is not None:
        click.echo(f"Principal                       : {fmt(principal)}")
    click.echo(f"Monthly payment                 : {fmt(metrics.monthly_payment)}")
    click.echo(f"Total repayment                 : {fmt(metrics.total_repayment)}")
    click.echo(f"Total interest                  : {fmt(metrics.total_interest)}")
    impact = metrics.grace_impact
    if impact.months_with_grace:
        click.echo(f"Grace period                    : {impact.months_with_grace} months")
    click.echo(f"Interest accrued during grace   : {fmt(impact.interest_accrued_during_grace)}")
    click.echo(f"Added interest because of grace : {fmt(impact.added_interest_from_grace)}")
    click.echo(f"Total interest without grace    : {fmt(impact.total_interest_without_grace)}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[PaymentBreakdown]) -> None:
    """Print the schedule as a simple tab separated table."""
    click.echo("\t".join(["Month", "Label", "Principal", "Interest", "Balance"]))
    for entry in schedule:
        click.echo(
            "\t".join(
                [
                    str(entry.month_index),
                    entry.label,
                    f"{entry.principal_paid:.2f}",
                    f"{entry.interest_paid:.2f}",
                    f"{entry.remaining_balance:.2f}",
                ]
            )
        )


def print_comparison(metrics: LoanMetrics, step: int = 12) -> None:
    """Print balances with and without the grace period side by side.

    Rows are aligned by month index, every ``step`` months plus the last
    row. A dash marks months after the alternative schedule was repaid.
    """
    click.echo("Balance comparison")
    click.echo("=" * 72)
    click.echo(f"{'Month':>6s} {'Label':>10s} {'With grace':>15s} {'Without grace':>15s}")
    rows = metrics.schedule
    alternative = metrics.alternative_schedule
    for index, entry in enumerate(rows):
        if index % step and index != len(rows) - 1:
            continue
        without = f"{alternative[index].remaining_balance:15.2f}" if index < len(alternative) else f"{'-':>15s}"
        click.echo(f"{entry.month_index:6d} {entry.label:>10s} {entry.remaining_balance:15.2f} {without}")
    click.echo("=" * 72)
    impact = metrics.grace_impact
    click.echo(f"Interest with grace    : {metrics.total_interest:.2f}")
    click.echo(f"Interest without grace : {impact.total_interest_without_grace:.2f}")
    click.echo(f"Added by grace period  : {impact.added_interest_from_grace:.2f}")

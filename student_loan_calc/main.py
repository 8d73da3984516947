"""Command‑line interface for the student loan calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute full schedules, view the summary cards or compare
the balance with and without a grace period. Results can be printed to the
terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import click

from .data_models import CURRENCIES, INTEREST_TYPES, LoanFormValues, LoanMetrics, PaymentBreakdown
from .engine import calculate_loan_metrics
from .formatter import print_comparison, print_schedule, print_summary
from .utils import parse_amount, parse_fraction
from .validation import LoanValidationError, ensure_valid

logger = logging.getLogger(__name__)


def build_form_values_from_options(
    tuition: str,
    living_expenses: Optional[str],
    rate: float,
    term: float,
    grace: int,
    start_date: Optional[str],
    currency: str = "USD",
    part_time_income: Optional[str] = None,
    early_repayment: Optional[str] = None,
    interest_type: str = "compound",
) -> LoanFormValues:
    """Convert raw option strings into :class:`LoanFormValues`.

    Amounts accept ``k``/``m`` suffixes and commas. The early repayment boost
    accepts ``"0.1"`` or ``"10%"``. Parsing errors raise ``click.BadParameter``;
    range checks are left to :func:`student_loan_calc.validation.ensure_valid`.
    """
    try:
        tuition_value = parse_amount(tuition)
        living_value = parse_amount(living_expenses) if living_expenses else 0.0
        income_value = parse_amount(part_time_income) if part_time_income else 0.0
        boost_value = parse_fraction(early_repayment) if early_repayment else 0.0
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return LoanFormValues(
        tuition=tuition_value,
        living_expenses=living_value,
        interest_rate=float(rate),
        loan_term_years=float(term),
        grace_period_months=int(grace),
        start_date=(start_date or "").strip(),
        currency=currency.upper(),
        part_time_income=income_value,
        early_repayment_rate=boost_value,
        interest_type=interest_type.lower(),
    )


def _checked(values: LoanFormValues) -> LoanFormValues:
    try:
        return ensure_valid(values)
    except LoanValidationError as exc:
        messages = "\n".join(f"  {name}: {message}" for name, message in exc.errors.items())
        raise click.UsageError(f"Invalid loan values:\n{messages}")


def schedule_to_dicts(schedule: Iterable[PaymentBreakdown]) -> list[dict]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    return [asdict(entry) for entry in schedule]


def metrics_to_dict(metrics: LoanMetrics) -> Dict[str, Any]:
    """Return the metrics as nested plain dictionaries."""
    return {
        "monthly_payment": metrics.monthly_payment,
        "total_repayment": metrics.total_repayment,
        "total_interest": metrics.total_interest,
        "grace_impact": asdict(metrics.grace_impact),
        "schedule": schedule_to_dicts(metrics.schedule),
        "alternative_schedule": schedule_to_dicts(metrics.alternative_schedule),
    }


def export_to_json(path: Path, values: LoanFormValues, metrics: LoanMetrics) -> None:
    """Export the inputs and metrics to a JSON file."""
    inputs = asdict(values)
    inputs["start_date"] = str(values.start_date)
    data = {"inputs": inputs, "metrics": metrics_to_dict(metrics)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: Iterable[PaymentBreakdown]) -> None:
    """Export the schedule to a CSV file."""
    header = ["Month", "Label", "Principal_Paid", "Interest_Paid", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [e.month_index, e.label, e.principal_paid, e.interest_paid, e.remaining_balance]
            )


def loan_options(func):
    """Attach the loan input options shared by all commands."""
    options = [
        click.option("--tuition", "-t", "tuition", required=True, help="Tuition amount (e.g. 15000 or 15k)"),
        click.option("--living-expenses", "-l", "living_expenses", help="Living expenses financed by the loan"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--term", "-y", "term", required=True, type=float, help="Loan term in years"),
        click.option("--grace", "-g", "grace", type=int, default=0, show_default=True, help="Grace period in months"),
        click.option("--start-date", "-s", "start_date", help="First month of the schedule (YYYY-MM-DD); defaults to today"),
        click.option("--currency", "currency", type=click.Choice(CURRENCIES, case_sensitive=False), default="USD", show_default=True),
        click.option("--part-time-income", "part_time_income", help="Extra principal paid every month"),
        click.option("--early-repayment", "early_repayment", help="Extra principal as a share of the base payment (0.1 or 10%)"),
        click.option("--interest-type", "interest_type", type=click.Choice(INTEREST_TYPES), default="compound", show_default=True),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command‑line student loan calculator with grace-period analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--full", "full", is_flag=True, help="Print every row instead of the first 120")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(full: bool, output: Optional[str], **options: Any) -> None:
    """Compute and print the month-by-month schedule."""
    values = _checked(build_form_values_from_options(**options))
    metrics = calculate_loan_metrics(values)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, values, metrics)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, metrics.schedule)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        logger.debug("Exported %d schedule rows to %s", len(metrics.schedule), path)
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(metrics, values.currency, values.principal)
    # Limit schedule length printed to avoid flooding the terminal
    max_rows = 120
    rows = metrics.schedule
    if not full and len(rows) > max_rows:
        click.echo(f"Schedule has {len(rows)} rows; showing first {max_rows} rows.")
        rows = rows[:max_rows]
    print_schedule(rows)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(output: Optional[str], **options: Any) -> None:
    """Compute and print only the summary metrics."""
    values = _checked(build_form_values_from_options(**options))
    metrics = calculate_loan_metrics(values)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        data = metrics_to_dict(metrics)
        del data["schedule"], data["alternative_schedule"]
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(metrics, values.currency, values.principal)


@cli.command()
@loan_options
@click.option("--step", "step", type=click.IntRange(min=1), default=12, show_default=True, help="Print every N-th month")
def compare(step: int, **options: Any) -> None:
    """Compare the balance with and without the grace period."""
    values = _checked(build_form_values_from_options(**options))
    metrics = calculate_loan_metrics(values)
    print_comparison(metrics, step=step)


if __name__ == "__main__":
    cli()

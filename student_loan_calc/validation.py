"""Validation of loan form values.

The engine accepts any numbers and clamps what it cannot use; rejecting
input a user most likely mistyped is the job of the front ends. They call
:func:`validate_form_values` to collect one message per offending field and
show those messages next to the inputs instead of running the calculation.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date
from typing import Dict, Optional

from .data_models import (
    CURRENCIES,
    INTEREST_TYPES,
    MAX_EARLY_REPAYMENT_RATE,
    MAX_GRACE_PERIOD_MONTHS,
    MAX_LOAN_TERM_YEARS,
    LoanFormValues,
)
from .utils import MAX_START_YEAR, parse_date

NUMERIC_FIELD_LABELS = {
    "tuition": "Tuition",
    "living_expenses": "Living expenses",
    "interest_rate": "Interest rate",
    "loan_term_years": "Loan term",
    "grace_period_months": "Grace period",
    "part_time_income": "Part-time income",
    "early_repayment_rate": "Early repayment boost",
}


class LoanValidationError(ValueError):
    """Raised by :func:`ensure_valid` when the form values are rejected."""

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        details = "; ".join(f"{name}: {message}" for name, message in self.errors.items())
        super().__init__(f"Invalid loan values ({details})")


def default_form_values(today: Optional[date] = None) -> LoanFormValues:
    """Return the values the form is pre-filled with."""
    return LoanFormValues(
        tuition=15000.0,
        living_expenses=8000.0,
        interest_rate=5.5,
        loan_term_years=10.0,
        grace_period_months=6,
        start_date=(today or date.today()).isoformat(),
        currency="USD",
        part_time_income=250.0,
        early_repayment_rate=0.1,
        interest_type="compound",
    )


def validate_form_values(values: LoanFormValues) -> Dict[str, str]:
    """Return a mapping of field name to error message (empty when valid)."""
    errors: Dict[str, str] = {}

    for name, label in NUMERIC_FIELD_LABELS.items():
        if not math.isfinite(getattr(values, name)):
            errors[name] = f"{label} must be a finite number."
    if errors:
        # range checks below assume finite numbers
        return errors

    if values.tuition <= 0:
        errors["tuition"] = "Enter a tuition amount greater than 0."
    if values.living_expenses < 0:
        errors["living_expenses"] = "Living expenses cannot be negative."
    if values.interest_rate < 0:
        errors["interest_rate"] = "Interest rate cannot be negative."
    if values.loan_term_years <= 0:
        errors["loan_term_years"] = "Loan term should be at least 0.5 years."
    elif values.loan_term_years > MAX_LOAN_TERM_YEARS:
        errors["loan_term_years"] = f"Loan term cannot exceed {MAX_LOAN_TERM_YEARS} years."
    if values.grace_period_months < 0:
        errors["grace_period_months"] = "Grace period cannot be negative."
    elif values.grace_period_months > MAX_GRACE_PERIOD_MONTHS:
        errors["grace_period_months"] = f"Grace period cannot exceed {MAX_GRACE_PERIOD_MONTHS} months."
    if not values.start_date:
        errors["start_date"] = "Please choose when your repayments start."
    else:
        start = parse_date(values.start_date)
        if start is not None and start.year > MAX_START_YEAR:
            errors["start_date"] = f"Repayments must start in {MAX_START_YEAR} or earlier."
    if values.part_time_income < 0:
        errors["part_time_income"] = "Part-time income cannot be negative."
    if not 0 <= values.early_repayment_rate <= MAX_EARLY_REPAYMENT_RATE:
        errors["early_repayment_rate"] = "Early repayment boost must be between 0% and 50%."
    if values.currency not in CURRENCIES:
        errors["currency"] = f"Currency must be one of {', '.join(CURRENCIES)}."
    if values.interest_type not in INTEREST_TYPES:
        errors["interest_type"] = "Interest type must be 'compound' or 'simple'."
    if values.principal <= 0:
        errors["tuition"] = "Provide tuition and living expenses before calculating."

    return errors


def ensure_valid(values: LoanFormValues) -> LoanFormValues:
    """Return ``values`` with the currency code normalized, or raise.

    Raises
    ------
    LoanValidationError
        If any field is invalid; ``errors`` holds the per-field messages.
    """
    values = replace(values, currency=str(values.currency).upper())
    errors = validate_form_values(values)
    if errors:
        raise LoanValidationError(errors)
    return values

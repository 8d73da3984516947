from dataclasses import replace
from datetime import date

import pytest

from student_loan_calc.validation import (
    LoanValidationError,
    default_form_values,
    ensure_valid,
    validate_form_values,
)


class TestDefaultFormValues:
    def test_defaults(self):
        values = default_form_values(today=date(2025, 9, 1))
        assert values.principal == 23000
        assert values.start_date == "2025-09-01"
        assert values.grace_period_months == 6
        assert values.part_time_income == 250
        assert values.early_repayment_rate == 0.1
        assert values.interest_type == "compound"
        assert validate_form_values(values) == {}


class TestValidateFormValues:
    def test_valid(self, canonical_values):
        assert validate_form_values(canonical_values) == {}

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("tuition", 0.0, "Enter a tuition amount greater than 0."),
            ("living_expenses", -1.0, "Living expenses cannot be negative."),
            ("interest_rate", -0.5, "Interest rate cannot be negative."),
            ("loan_term_years", 0.0, "Loan term should be at least 0.5 years."),
            ("grace_period_months", -1, "Grace period cannot be negative."),
            ("start_date", "", "Please choose when your repayments start."),
            ("part_time_income", -10.0, "Part-time income cannot be negative."),
            ("early_repayment_rate", 0.6, "Early repayment boost must be between 0% and 50%."),
            ("interest_type", "daily", "Interest type must be 'compound' or 'simple'."),
        ],
    )
    def test_field_errors(self, canonical_values, field, value, message):
        errors = validate_form_values(replace(canonical_values, **{field: value}))
        assert errors == {field: message}

    def test_unknown_currency(self, canonical_values):
        errors = validate_form_values(replace(canonical_values, currency="JPY"))
        assert list(errors) == ["currency"]

    def test_missing_principal_overrides_tuition_message(self, canonical_values):
        errors = validate_form_values(replace(canonical_values, tuition=0.0, living_expenses=0.0))
        assert errors["tuition"] == "Provide tuition and living expenses before calculating."

    def test_collects_every_error(self, canonical_values):
        values = replace(canonical_values, interest_rate=-1.0, loan_term_years=-2.0)
        assert set(validate_form_values(values)) == {"interest_rate", "loan_term_years"}

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("loan_term_years", 50.5, "Loan term cannot exceed 50 years."),
            ("loan_term_years", 3000.0, "Loan term cannot exceed 50 years."),
            ("grace_period_months", 121, "Grace period cannot exceed 120 months."),
            ("start_date", "9999-06-01", "Repayments must start in 9900 or earlier."),
        ],
    )
    def test_upper_limits(self, canonical_values, field, value, message):
        errors = validate_form_values(replace(canonical_values, **{field: value}))
        assert errors == {field: message}

    def test_longest_term_is_accepted(self, canonical_values):
        assert validate_form_values(replace(canonical_values, loan_term_years=50.0)) == {}

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_numbers(self, canonical_values, value):
        values = replace(canonical_values, loan_term_years=value, part_time_income=value)
        assert validate_form_values(values) == {
            "loan_term_years": "Loan term must be a finite number.",
            "part_time_income": "Part-time income must be a finite number.",
        }


class TestEnsureValid:
    def test_normalizes_currency(self, canonical_values):
        values = ensure_valid(replace(canonical_values, currency="gbp"))
        assert values.currency == "GBP"

    def test_raises_with_errors(self, canonical_values):
        with pytest.raises(LoanValidationError) as exc_info:
            ensure_valid(replace(canonical_values, tuition=-5.0))
        assert "tuition" in exc_info.value.errors
        assert isinstance(exc_info.value, ValueError)
        assert "tuition" in str(exc_info.value)

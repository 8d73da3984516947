import pytest

from student_loan_calc.engine import calculate_loan_metrics
from student_loan_calc.formatter import format_currency, print_comparison, print_schedule, print_summary


class TestFormatCurrency:
    @pytest.mark.parametrize(
        "value, currency, expected",
        [
            (23000.4, "USD", "$23,000"),
            (1234.5, "USD", "$1,235"),
            (1500, "INR", "₹1,500"),
            (0.2, "EUR", "€0"),
            (-1500, "EUR", "-€1,500"),
            (1_250_000, "GBP", "£1,250,000"),
        ],
    )
    def test_format(self, value, currency, expected):
        assert format_currency(value, currency) == expected

    def test_non_finite_is_zero(self):
        assert format_currency(float("nan"), "USD") == "$0"
        assert format_currency(float("inf"), "GBP") == "£0"

    def test_unknown_code_is_prefixed(self):
        assert format_currency(10, "CHF") == "CHF 10"


class TestPrinters:
    def test_print_summary(self, canonical_values, capsys):
        metrics = calculate_loan_metrics(canonical_values)
        print_summary(metrics, "EUR", canonical_values.principal)
        out = capsys.readouterr().out
        assert "€23,000" in out
        assert "6 months" in out
        assert "Added interest because of grace" in out

    def test_print_schedule(self, grace_values, capsys):
        metrics = calculate_loan_metrics(grace_values)
        print_schedule(metrics.schedule[:2])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split("\t") == ["Month", "Label", "Principal", "Interest", "Balance"]
        assert lines[1].split("\t") == ["0", "Sep 2025", "0.00", "100.00", "10100.00"]
        assert lines[2].split("\t") == ["1", "Oct 2025", "0.00", "101.00", "10201.00"]

    def test_print_comparison_marks_repaid_months(self, canonical_values, capsys):
        metrics = calculate_loan_metrics(canonical_values)
        print_comparison(metrics, step=12)
        out = capsys.readouterr().out
        last_row = [line for line in out.splitlines() if line.strip().startswith("125")][0]
        assert last_row.split()[-1] == "-"
        assert "Added by grace period" in out

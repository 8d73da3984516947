import json
import logging
import math
import os
from dataclasses import replace

from flask import Flask, jsonify, render_template, request

from student_loan_calc.data_models import CURRENCIES, CURRENCY_SYMBOLS, INTEREST_TYPES, LoanFormValues
from student_loan_calc.engine import calculate_loan_metrics
from student_loan_calc.formatter import format_currency
from student_loan_calc.main import metrics_to_dict
from student_loan_calc.validation import default_form_values, validate_form_values

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = (
    "tuition",
    "living_expenses",
    "interest_rate",
    "loan_term_years",
    "part_time_income",
    "early_repayment_rate",
)


def _number(raw, default: float = 0.0) -> float:
    """Read a numeric form field.

    Blank input counts as zero and a missing field takes ``default``. Text
    that is not a number becomes NaN; :func:`form_errors` reports it.
    """
    if raw is None:
        return default
    text = str(raw).strip().replace(",", "")
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def _whole(value: float) -> int:
    # int() raises on NaN and infinity; form_errors reports both
    return int(value) if math.isfinite(value) else 0


def form_to_values(form, defaults: LoanFormValues) -> LoanFormValues:
    """Build :class:`LoanFormValues` from submitted form or query parameters."""
    numbers = {name: _number(form.get(name), getattr(defaults, name)) for name in NUMERIC_FIELDS}
    grace = form.get("grace_period_months")
    return LoanFormValues(
        grace_period_months=_whole(_number(grace, defaults.grace_period_months)),
        start_date=form.get("start_date", defaults.start_date).strip(),
        currency=form.get("currency", defaults.currency).upper(),
        interest_type=form.get("interest_type", defaults.interest_type).lower(),
        **numbers,
    )


def form_errors(form, values: LoanFormValues):
    """Validate ``values`` and flag numeric fields whose text did not parse."""
    errors = validate_form_values(values)
    for name in NUMERIC_FIELDS + ("grace_period_months",):
        raw = form.get(name)
        if raw is not None and math.isnan(_number(raw)):
            errors[name] = "Enter a number."
        elif name == "grace_period_months" and raw is not None and math.isinf(_number(raw)):
            errors[name] = "Grace period must be a finite number."
    return errors


def chart_payload(metrics):
    """Chart.js data: monthly principal/interest bars and both balance lines.

    The balance without grace is aligned with the primary schedule by index;
    months past the end of the alternative schedule are ``None`` (gaps).
    """
    alternative = metrics.alternative_schedule
    return {
        "labels": [entry.label for entry in metrics.schedule],
        "principal": [entry.principal_paid for entry in metrics.schedule],
        "interest": [entry.interest_paid for entry in metrics.schedule],
        "balance": [entry.remaining_balance for entry in metrics.schedule],
        "balance_without_grace": [
            alternative[index].remaining_balance if index < len(alternative) else None
            for index in range(len(metrics.schedule))
        ],
    }


def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
    app.config["DEFAULT_CURRENCY"] = os.environ.get("LOAN_CALC_DEFAULT_CURRENCY", "USD").upper()
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    if config:
        app.config.update(config)

    def _defaults() -> LoanFormValues:
        defaults = default_form_values()
        currency = app.config["DEFAULT_CURRENCY"]
        if currency in CURRENCIES:
            defaults = replace(defaults, currency=currency)
        return defaults

    @app.template_filter("currency")
    def currency_filter(value, code="USD"):
        return format_currency(value, code)

    @app.route("/", methods=["GET", "POST"])
    def index():
        values = _defaults()
        metrics = None
        errors = {}

        if request.method == "POST":
            values = form_to_values(request.form, values)
            errors = form_errors(request.form, values)
            if errors:
                logger.info("Rejected loan form: %s", ", ".join(sorted(errors)))
            else:
                metrics = calculate_loan_metrics(values)

        return render_template(
            "index.html",
            values=values,
            metrics=metrics,
            errors=errors,
            principal=values.principal,
            currencies=CURRENCIES,
            currency_symbols=CURRENCY_SYMBOLS,
            interest_types=INTEREST_TYPES,
            chart_json=json.dumps(chart_payload(metrics)) if metrics else "null",
            asset_version=app.config["ASSET_VERSION"],
        )

    @app.get("/api/metrics")
    def api_metrics():
        values = form_to_values(request.args, _defaults())
        errors = form_errors(request.args, values)
        if errors:
            return jsonify({"errors": errors}), 400
        metrics = calculate_loan_metrics(values)
        payload = metrics_to_dict(metrics)
        payload["principal"] = values.principal
        payload["currency"] = values.currency
        return jsonify(payload)

    return app


app = create_app()


if __name__ == "__main__":
    print("Starting Student Loan Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)

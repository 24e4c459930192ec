"""Health and readiness blueprint."""

from typing import Any

from flask import Blueprint, Response, jsonify

from drawdown.models import ProjectionParameters, project

health_bp = Blueprint("health", __name__)

# One-year projection whose outcome is known: 40,000 drawn from 1,000,000 at 13%
_SMOKE_PARAMETERS = ProjectionParameters(
    annual_return_rate=0.0,
    annual_inflation_rate=0.0,
    initial_yearly_spend=40000.0,
    effective_tax_rate=0.13,
    starting_tax_deferred_balance=1000000.0,
    projection_years=1,
)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Liveness endpoint.

    Returns:
        JSON response with status information
    """
    return jsonify({"status": "ok"})


@health_bp.route("/readyz")
def readiness_check() -> Any:
    """Readiness endpoint that runs a tiny projection through the engine.

    Returns:
        200 when the engine produces the expected ending balance, 503 otherwise
    """
    record = project(_SMOKE_PARAMETERS)[0]
    if abs(record.ending_total_balance - 960000.0) > 0.01:
        return jsonify({"status": "degraded", "engine": "unexpected result"}), 503
    return jsonify({"status": "ok", "engine": "ok"})

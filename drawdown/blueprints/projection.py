"""
Projection blueprint.

Exposes the drawdown projection engine over JSON. Requests carry rates as
percentages and amounts as numbers or formatted currency text; responses carry
the parameters used, the summary figures and one record per projected year.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from drawdown.models.parameters import ParameterError
from drawdown.services.projection_service import ProjectionService

projection_bp = Blueprint("projection", __name__, url_prefix="/api")


@projection_bp.route("/projections", methods=["POST"])
def create_projection() -> Any:
    """Run a projection for the posted assumptions.

    Query parameters:
        formatted: "true" to include display-formatted table rows

    Returns:
        JSON response with parameters, summary and records, or a 400 listing
        every invalid parameter
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return (
            jsonify(
                {
                    "error": "Invalid parameters",
                    "messages": ["Request body must be a JSON object"],
                }
            ),
            400,
        )

    include_table = request.args.get("formatted", "false").lower() == "true"

    try:
        service = ProjectionService()
        results = service.run_projection(data, include_table=include_table)
    except ParameterError as e:
        return jsonify({"error": "Invalid parameters", "messages": e.messages}), 400
    except Exception as e:
        current_app.logger.error(f"Error running projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(results), 200


@projection_bp.route("/projections/defaults", methods=["GET"])
def get_projection_defaults() -> Any:
    """Get the defaults applied to fields a request leaves out.

    Returns:
        JSON response with rates expressed as percentages
    """
    settings = ProjectionService().settings
    return jsonify(
        {
            "taxable_account_tax_rate": settings.default_taxable_account_tax_rate
            * 100,
            "projection_years": settings.default_projection_years,
            "income_inflation_adjusted": settings.default_income_inflation_adjusted,
        }
    )

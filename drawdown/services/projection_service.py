"""
Projection service for turning user input into projection results.

The service is the parameter-assembly boundary between the input surface and
the engine: it converts percentage and formatted-currency inputs into a
ProjectionParameters snapshot, fills in configured defaults, runs the
projection and bundles the records with their summary.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from drawdown.config import Settings, get_global_settings
from drawdown.models.formatting import (
    CurrencyFormatter,
    parse_currency,
    parse_percentage,
)
from drawdown.models.parameters import ParameterError, ProjectionParameters
from drawdown.models.projection import project
from drawdown.models.records import ProjectionResult
from drawdown.models.summary import summarize

logger = logging.getLogger(__name__)

# Rates are entered as percentages (5.5 means 5.5%)
PERCENT_FIELDS = (
    "annual_return_rate",
    "annual_inflation_rate",
    "effective_tax_rate",
    "taxable_account_tax_rate",
)

CURRENCY_FIELDS = (
    "initial_yearly_spend",
    "one_time_additional_spend",
    "starting_tax_deferred_balance",
    "starting_tax_free_balance",
    "starting_taxable_balance",
    "annual_external_income",
)

# Summed into annual_external_income
INCOME_COMPONENTS = ("social_security", "pension", "annuity", "other_income")


class ProjectionService:
    """Service for running drawdown projections from raw request data."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the projection service.

        Args:
            settings: Settings providing request defaults (global settings if None)
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_global_settings()
        self.formatter = CurrencyFormatter()

    def build_parameters(self, payload: Mapping[str, Any]) -> ProjectionParameters:
        """Convert raw input into validated projection parameters.

        Args:
            payload: Field values as entered: rates in percent, amounts as
                numbers or formatted text, external income either as a total
                or as its components

        Returns:
            Validated ProjectionParameters

        Raises:
            ParameterError: If any value cannot be parsed or is out of range
        """
        data: Dict[str, Any] = dict(payload)

        components = {
            name: data.pop(name) for name in INCOME_COMPONENTS if name in data
        }
        if components:
            if "annual_external_income" in data:
                raise ParameterError(
                    "Provide annual_external_income or its components "
                    f"({', '.join(INCOME_COMPONENTS)}), not both"
                )
            data["annual_external_income"] = sum(
                parse_currency(value) for value in components.values()
            )

        for field_name in PERCENT_FIELDS:
            if field_name in data:
                data[field_name] = parse_percentage(data[field_name])

        for field_name in CURRENCY_FIELDS:
            if field_name in data:
                data[field_name] = parse_currency(data[field_name])

        data.setdefault(
            "taxable_account_tax_rate", self.settings.default_taxable_account_tax_rate
        )
        data.setdefault("projection_years", self.settings.default_projection_years)
        data.setdefault(
            "income_inflation_adjusted",
            self.settings.default_income_inflation_adjusted,
        )

        return ProjectionParameters.from_mapping(data)

    def run_projection(
        self, payload: Mapping[str, Any], include_table: bool = False
    ) -> Dict[str, Any]:
        """Run a projection for raw input.

        Args:
            payload: Raw input, see build_parameters()
            include_table: Whether to add display-formatted table rows

        Returns:
            Dictionary with parameters, summary and per-year records

        Raises:
            ParameterError: If the input is invalid
        """
        try:
            params = self.build_parameters(payload)
            result = project(params)
        except ParameterError as e:
            self.logger.info(f"Rejected projection request: {str(e)}")
            raise

        summary = summarize(result)
        self.logger.info(
            f"Projected {len(result)} years, final balance "
            f"{self.formatter.format_currency(summary.final_balance)}"
        )

        results = result.to_dict()
        results["summary"] = summary.model_dump(mode="json")
        if include_table:
            results["table"] = self.format_table(result)
        return results

    def format_table(self, result: ProjectionResult) -> List[Dict[str, str]]:
        """Format every record of a result as display strings."""
        return [self.formatter.format_record(record) for record in result]

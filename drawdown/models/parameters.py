"""
Projection parameters and their validation.

This module defines the immutable parameter set consumed by the projection
engine, the accepted domain of every field, and the ParameterError raised when
a parameter set falls outside that domain.
"""

import math
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

MIN_PROJECTION_YEARS = 1
MAX_PROJECTION_YEARS = 50

MAX_RETURN_RATE = 0.5
MAX_INFLATION_RATE = 0.2
MAX_EFFECTIVE_TAX_RATE = 0.5
MAX_TAXABLE_ACCOUNT_TAX_RATE = 0.5

DEFAULT_TAXABLE_ACCOUNT_TAX_RATE = 0.15

# Fifty years of maximum growth on this amount stays a finite float
MAX_AMOUNT = 1e12

MAX_AGE = 130


class ParameterError(ValueError):
    """Raised when projection parameters are outside the accepted domain."""

    def __init__(self, messages: Union[str, List[str]]):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class ProjectionParameters(BaseModel):
    """
    Immutable assumptions for a single drawdown projection.

    Rates are fractions (0.055 for 5.5%), amounts are plain currency units.
    Construction only checks types; range checks live in
    validate_parameters() so that every violation is reported at once as a
    ParameterError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    annual_return_rate: float = Field(
        ..., description="Growth rate applied to post-withdrawal balances"
    )
    annual_inflation_rate: float = Field(
        ..., description="Rate at which the spending need compounds after year 0"
    )
    initial_yearly_spend: float = Field(
        ..., description="Annual spending target in today's dollars"
    )
    one_time_additional_spend: float = Field(
        default=0.0, description="Extra spending applied in the first year only"
    )
    effective_tax_rate: float = Field(
        ..., description="Flat tax rate on tax-deferred withdrawals"
    )
    taxable_account_tax_rate: float = Field(
        default=DEFAULT_TAXABLE_ACCOUNT_TAX_RATE,
        description="Flat tax rate on taxable-account withdrawals",
    )
    starting_tax_deferred_balance: float = Field(
        default=0.0, description="Traditional 401(k)/IRA balance"
    )
    starting_tax_free_balance: float = Field(
        default=0.0, description="Roth balance"
    )
    starting_taxable_balance: float = Field(
        default=0.0, description="Brokerage balance"
    )
    projection_years: int = Field(..., description="Number of years to simulate")
    annual_external_income: float = Field(
        default=0.0,
        description="Pension, annuity, Social Security and other income per year",
    )
    income_inflation_adjusted: bool = Field(
        default=False,
        description="Whether external income grows with inflation each year",
    )
    allow_partial_withdrawal: bool = Field(
        default=False,
        description="Drain what is left when the need exceeds the total balance",
    )
    start_year: Optional[int] = Field(
        default=None, description="Calendar year of the first projected year"
    )
    current_age: Optional[int] = Field(
        default=None, description="Retiree age in the first year"
    )

    @property
    def total_starting_balance(self) -> float:
        """Sum of the three starting account balances."""
        return (
            self.starting_tax_deferred_balance
            + self.starting_tax_free_balance
            + self.starting_taxable_balance
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProjectionParameters":
        """
        Build and validate parameters from a plain mapping.

        Type errors reported by pydantic and domain errors reported by
        validate_parameters() both surface as ParameterError.

        Args:
            data: Field values keyed by field name

        Returns:
            A validated ProjectionParameters instance

        Raises:
            ParameterError: If any field is missing, mistyped or out of range
        """
        try:
            params = cls.model_validate(dict(data))
        except ValidationError as e:
            messages = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                messages.append(f"{location}: {error['msg']}")
            raise ParameterError(messages) from e

        validate_parameters(params)
        return params


_AMOUNT_FIELDS = (
    "initial_yearly_spend",
    "one_time_additional_spend",
    "starting_tax_deferred_balance",
    "starting_tax_free_balance",
    "starting_taxable_balance",
    "annual_external_income",
)

_RATE_BOUNDS = (
    ("annual_return_rate", MAX_RETURN_RATE, "Rate of return"),
    ("annual_inflation_rate", MAX_INFLATION_RATE, "Inflation rate"),
    ("effective_tax_rate", MAX_EFFECTIVE_TAX_RATE, "Tax rate"),
    (
        "taxable_account_tax_rate",
        MAX_TAXABLE_ACCOUNT_TAX_RATE,
        "Taxable account tax rate",
    ),
)


def validate_parameters(params: ProjectionParameters) -> None:
    """
    Check a parameter set against the accepted domain.

    Accepted domain:
        - return rate in [0, 0.5], inflation rate in [0, 0.2]
        - effective and taxable-account tax rates in [0, 0.5]
        - every amount finite and in [0, 1e12], starting balances summing to > 0
        - projection_years an integer in [1, 50]
        - current_age, when given, in [0, 130]

    Raises:
        ParameterError: Listing every violation found
    """
    errors: List[str] = []

    for field_name, upper_bound, label in _RATE_BOUNDS:
        rate = getattr(params, field_name)
        if not math.isfinite(rate) or rate < 0 or rate > upper_bound:
            errors.append(
                f"{label} should be between 0% and {upper_bound * 100:.0f}%"
            )

    for field_name in _AMOUNT_FIELDS:
        amount = getattr(params, field_name)
        if not math.isfinite(amount):
            errors.append(f"{field_name} must be a finite number")
        elif amount < 0:
            errors.append(f"{field_name} cannot be negative: {amount}")
        elif amount > MAX_AMOUNT:
            errors.append(f"{field_name} cannot exceed {MAX_AMOUNT:,.0f}: {amount}")

    if math.isfinite(params.total_starting_balance):
        if params.total_starting_balance <= 0:
            errors.append("Total starting balance must be greater than 0")
    else:
        errors.append("Total starting balance must be a finite number")

    if (
        isinstance(params.projection_years, bool)
        or not isinstance(params.projection_years, int)
        or not MIN_PROJECTION_YEARS <= params.projection_years <= MAX_PROJECTION_YEARS
    ):
        errors.append(
            f"Projection years should be between {MIN_PROJECTION_YEARS} "
            f"and {MAX_PROJECTION_YEARS}"
        )

    if params.current_age is not None and not 0 <= params.current_age <= MAX_AGE:
        errors.append(f"Current age should be between 0 and {MAX_AGE}")

    if errors:
        raise ParameterError(errors)

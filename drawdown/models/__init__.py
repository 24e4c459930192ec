"""Data models and the projection engine for retirement drawdown planning."""

from .parameters import (
    DEFAULT_TAXABLE_ACCOUNT_TAX_RATE,
    MAX_AMOUNT,
    MAX_PROJECTION_YEARS,
    MIN_PROJECTION_YEARS,
    ParameterError,
    ProjectionParameters,
    validate_parameters,
)
from .records import (
    AccountBalances,
    ProjectionResult,
    WithdrawalBreakdown,
    YearRecord,
)
from .projection import (
    apply_growth,
    calculate_taxes,
    external_income_for_year,
    project,
    withdraw_in_priority_order,
)
from .summary import ProjectionSummary, summarize
from .formatting import CurrencyFormatter, parse_currency, parse_percentage

__all__ = [
    "DEFAULT_TAXABLE_ACCOUNT_TAX_RATE",
    "MAX_AMOUNT",
    "MAX_PROJECTION_YEARS",
    "MIN_PROJECTION_YEARS",
    "ParameterError",
    "ProjectionParameters",
    "validate_parameters",
    "AccountBalances",
    "ProjectionResult",
    "WithdrawalBreakdown",
    "YearRecord",
    "apply_growth",
    "calculate_taxes",
    "external_income_for_year",
    "project",
    "withdraw_in_priority_order",
    "ProjectionSummary",
    "summarize",
    "CurrencyFormatter",
    "parse_currency",
    "parse_percentage",
]

"""
Summary metrics for a drawdown projection.

Pure reductions over a ProjectionResult: starting and final balances,
cumulative taxes and withdrawals, average withdrawal and growth percentages,
and the depletion and low-balance markers used to colour summary cards and
table rows.
"""

from typing import List, Literal, Optional

import numpy as np
from pydantic import BaseModel, Field

from .records import ProjectionResult

BalanceStatus = Literal["healthy", "warning", "depleted"]

# Final balance above this share of the starting balance counts as healthy
HEALTHY_FINAL_BALANCE_RATIO = 0.5

# A year is low on funds when its ending balance covers fewer than this many
# years of that year's withdrawal
LOW_BALANCE_WITHDRAWAL_MULTIPLE = 5


class ProjectionSummary(BaseModel):
    """Headline figures for a projection."""

    total_starting_balance: float = Field(..., ge=0)
    final_balance: float = Field(..., ge=0)
    final_year: int = Field(..., description="Year label of the last record")
    cumulative_withdrawals: float = Field(..., ge=0)
    cumulative_taxes: float = Field(..., ge=0)
    cumulative_net_spending: float = Field(..., ge=0)
    average_withdrawal_percent: float = Field(..., ge=0)
    average_growth_percent: float = Field(
        ..., ge=0, description="Mean yearly growth as a percent of the beginning balance"
    )
    depletion_year: Optional[int] = Field(
        default=None, description="First year ending with no money left"
    )
    shortfall_years: List[int] = Field(
        default_factory=list, description="Years whose need was not fully served"
    )
    low_balance_years: List[int] = Field(
        default_factory=list, description="Years flagged as low on funds"
    )
    balance_status: BalanceStatus = Field(..., description="Traffic-light status")


def total_starting_balance(result: ProjectionResult) -> float:
    """Get the combined starting balance of the three accounts."""
    return result.parameters.total_starting_balance


def final_balance(result: ProjectionResult) -> float:
    """Get the ending total balance of the last projected year."""
    if not result.records:
        return 0.0
    return result.records[-1].ending_total_balance


def cumulative_taxes(result: ProjectionResult) -> float:
    """Get total taxes paid over the projection."""
    return float(np.sum(result.to_arrays()["taxes_paid"]))


def cumulative_withdrawals(result: ProjectionResult) -> float:
    """Get total gross withdrawals over the projection."""
    return float(np.sum(result.to_arrays()["gross_withdrawal"]))


def cumulative_net_spending(result: ProjectionResult) -> float:
    """Get total after-tax spending, income included, over the projection."""
    return float(np.sum(result.to_arrays()["net_spending_available"]))


def average_withdrawal_percent(result: ProjectionResult) -> float:
    """Mean of percent_of_balance_withdrawn across every projected year."""
    if not result.records:
        return 0.0
    return float(np.mean(result.to_arrays()["percent_of_balance_withdrawn"]))


def average_growth_percent(result: ProjectionResult) -> float:
    """Mean of growth / beginning balance, in percent, over years that began funded."""
    arrays = result.to_arrays()
    funded = arrays["beginning_total_balance"] > 0
    if not funded.any():
        return 0.0
    rates = arrays["growth"][funded] / arrays["beginning_total_balance"][funded]
    return float(np.mean(rates) * 100)


def depletion_year(result: ProjectionResult) -> Optional[int]:
    """Get the first year whose ending balance is zero, if any."""
    for record in result.records:
        if record.ending_total_balance <= 0:
            return record.year
    return None


def shortfall_years(result: ProjectionResult) -> List[int]:
    """Get the years in which the net cash need could not be fully served."""
    return [record.year for record in result.records if record.shortfall]


def low_balance_years(
    result: ProjectionResult, multiple: float = LOW_BALANCE_WITHDRAWAL_MULTIPLE
) -> List[int]:
    """
    Get the years whose ending balance is below multiple x that year's withdrawal.

    Args:
        result: Projection result
        multiple: Number of years of withdrawals the balance should cover

    Returns:
        Year labels in chronological order
    """
    arrays = result.to_arrays()
    flagged = arrays["ending_total_balance"] < arrays["gross_withdrawal"] * multiple
    return [int(year) for year in arrays["year"][flagged]]


def balance_status(result: ProjectionResult) -> BalanceStatus:
    """Classify the final balance relative to the starting balance."""
    ending = final_balance(result)
    if ending > total_starting_balance(result) * HEALTHY_FINAL_BALANCE_RATIO:
        return "healthy"
    if ending > 0:
        return "warning"
    return "depleted"


def summarize(result: ProjectionResult) -> ProjectionSummary:
    """
    Calculate every summary metric for a projection.

    Args:
        result: Projection result

    Returns:
        ProjectionSummary bundling the headline figures
    """
    final_year = result.records[-1].year if result.records else 0

    return ProjectionSummary(
        total_starting_balance=total_starting_balance(result),
        final_balance=final_balance(result),
        final_year=final_year,
        cumulative_withdrawals=cumulative_withdrawals(result),
        cumulative_taxes=cumulative_taxes(result),
        cumulative_net_spending=cumulative_net_spending(result),
        average_withdrawal_percent=average_withdrawal_percent(result),
        average_growth_percent=average_growth_percent(result),
        depletion_year=depletion_year(result),
        shortfall_years=shortfall_years(result),
        low_balance_years=low_balance_years(result),
        balance_status=balance_status(result),
    )

"""
Projection result models.

A projection produces one YearRecord per simulated year. ProjectionResult
keeps those records in chronological order together with the parameters that
produced them, and offers column-oriented and JSON-ready views for the table
and chart collaborators.
"""

from typing import Any, Dict, Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field

from .parameters import ProjectionParameters


class AccountBalances(BaseModel):
    """Balances of the three account categories at one point in time."""

    model_config = ConfigDict(frozen=True)

    tax_deferred: float = Field(default=0.0, ge=0)
    tax_free: float = Field(default=0.0, ge=0)
    taxable: float = Field(default=0.0, ge=0)

    @property
    def total(self) -> float:
        return self.tax_deferred + self.tax_free + self.taxable


class WithdrawalBreakdown(BaseModel):
    """Amount drawn from each account category in a single year."""

    model_config = ConfigDict(frozen=True)

    tax_deferred: float = Field(default=0.0, ge=0, description="From 401(k)/IRA")
    tax_free: float = Field(default=0.0, ge=0, description="From Roth")
    taxable: float = Field(default=0.0, ge=0, description="From brokerage")

    @property
    def total(self) -> float:
        return self.tax_deferred + self.tax_free + self.taxable


class YearRecord(BaseModel):
    """Outcome of one projected year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., description="Calendar year, or index when no start year")
    year_index: int = Field(..., ge=0, description="0-based position in the run")
    age: Optional[int] = Field(default=None, description="Retiree age this year")

    spending_need: float = Field(..., ge=0, description="Nominal spending need")
    external_income: float = Field(..., ge=0, description="Income received")
    net_cash_need: float = Field(..., ge=0, description="Need not covered by income")

    beginning_total_balance: float = Field(..., ge=0)
    withdrawals: WithdrawalBreakdown = Field(default_factory=WithdrawalBreakdown)
    gross_withdrawal: float = Field(..., ge=0)
    taxes_paid: float = Field(..., ge=0)
    net_spending_available: float = Field(..., ge=0)
    growth: float = Field(default=0.0, ge=0, description="Growth credited this year")

    ending_tax_deferred_balance: float = Field(..., ge=0)
    ending_tax_free_balance: float = Field(..., ge=0)
    ending_taxable_balance: float = Field(..., ge=0)
    ending_total_balance: float = Field(..., ge=0)

    percent_of_balance_withdrawn: float = Field(..., ge=0)
    monthly_net_spending: float = Field(..., ge=0)

    depleted: bool = Field(default=False, description="Funds were already exhausted")
    shortfall: bool = Field(
        default=False, description="The net cash need was not fully served"
    )


# Numeric columns exported by ProjectionResult.to_arrays()
ARRAY_FIELDS = (
    "spending_need",
    "external_income",
    "net_cash_need",
    "beginning_total_balance",
    "gross_withdrawal",
    "taxes_paid",
    "net_spending_available",
    "growth",
    "ending_tax_deferred_balance",
    "ending_tax_free_balance",
    "ending_taxable_balance",
    "ending_total_balance",
    "percent_of_balance_withdrawn",
    "monthly_net_spending",
)


class ProjectionResult(BaseModel):
    """
    Ordered sequence of YearRecord produced by a single projection run.

    Behaves like a read-only sequence: len(), iteration and indexing all
    operate on the records.

    Example:
        ```python
        result = project(params)
        for record in result:
            print(record.year, record.ending_total_balance)
        arrays = result.to_arrays()
        ```
    """

    model_config = ConfigDict(frozen=True)

    parameters: ProjectionParameters = Field(
        ..., description="Parameters that produced this result"
    )
    records: List[YearRecord] = Field(
        default_factory=list, description="Per-year records in chronological order"
    )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[YearRecord]:  # type: ignore[override]
        return iter(self.records)

    def __getitem__(self, index: int) -> YearRecord:
        return self.records[index]

    @property
    def years(self) -> List[int]:
        """Get the year labels in order."""
        return [record.year for record in self.records]

    def get_record(self, year: int) -> Optional[YearRecord]:
        """Get the record for a given year label, if present."""
        for record in self.records:
            if record.year == year:
                return record
        return None

    def to_arrays(self) -> Dict[str, NDArray[Any]]:
        """
        Get the records as numpy columns.

        Returns:
            Dictionary mapping field name to a 1-D array with one entry per year
        """
        arrays: Dict[str, NDArray[Any]] = {
            "year": np.array([record.year for record in self.records], dtype=np.int64)
        }
        for field_name in ARRAY_FIELDS:
            arrays[field_name] = np.array(
                [getattr(record, field_name) for record in self.records],
                dtype=np.float64,
            )
        return arrays

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "parameters": self.parameters.model_dump(mode="json"),
            "records": [record.model_dump(mode="json") for record in self.records],
        }

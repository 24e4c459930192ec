"""
Currency and percentage conversion for the input and display surfaces.

Form inputs arrive as formatted text ("$1,250,000", "5.5%"); the engine works
in plain currency units and fractional rates. This module converts in both
directions.
"""

import math
import re
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

from .parameters import ParameterError
from .records import YearRecord

Numeric = Union[int, float, str, None]

_CURRENCY_NOISE = re.compile(r"[,$\s]")


def parse_currency(value: Numeric) -> float:
    """
    Parse a currency amount entered as a number or as formatted text.

    Commas, dollar signs and whitespace are ignored. Empty input counts as 0.

    Args:
        value: Raw input value

    Returns:
        The amount as a float

    Raises:
        ParameterError: If the value is not a finite number
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ParameterError(f"Invalid currency amount: {value!r}")
    if isinstance(value, (int, float)):
        amount = float(value)
    elif not isinstance(value, str):
        raise ParameterError(f"Invalid currency amount: {value!r}")
    else:
        cleaned = _CURRENCY_NOISE.sub("", value)
        if cleaned == "":
            return 0.0
        try:
            amount = float(cleaned)
        except ValueError:
            raise ParameterError(f"Invalid currency amount: {value!r}")

    if not math.isfinite(amount):
        raise ParameterError(f"Invalid currency amount: {value!r}")
    return amount


def parse_percentage(value: Numeric) -> float:
    """
    Parse a percentage ("5.5", "5.5%" or 5.5) into a fraction (0.055).

    Raises:
        ParameterError: If the value is missing or not a finite number
    """
    if value is None or isinstance(value, bool):
        raise ParameterError(f"Invalid percentage: {value!r}")
    if isinstance(value, (int, float)):
        percentage = float(value)
    elif not isinstance(value, str):
        raise ParameterError(f"Invalid percentage: {value!r}")
    else:
        cleaned = value.strip().rstrip("%").strip()
        try:
            percentage = float(cleaned)
        except ValueError:
            raise ParameterError(f"Invalid percentage: {value!r}")

    if not math.isfinite(percentage):
        raise ParameterError(f"Invalid percentage: {value!r}")
    return percentage / 100


class CurrencyFormatter(BaseModel):
    """Formats currency and percentage values for display."""

    currency_symbol: str = Field(default="$", description="Currency symbol")
    decimal_places: int = Field(
        default=0, ge=0, le=10, description="Number of decimal places"
    )
    show_currency_symbol: bool = Field(
        default=True, description="Whether to show currency symbol"
    )

    def format_currency(self, amount: float, show_symbol: Optional[bool] = None) -> str:
        """
        Format a currency amount for display.

        Args:
            amount: The amount to format
            show_symbol: Override the default symbol display setting

        Returns:
            Formatted currency string, e.g. "$1,250,000"
        """
        show_symbol = (
            show_symbol if show_symbol is not None else self.show_currency_symbol
        )

        rounded = round(amount, self.decimal_places)
        if self.decimal_places > 0:
            formatted = f"{abs(rounded):,.{self.decimal_places}f}"
        else:
            formatted = f"{abs(int(rounded)):,}"

        sign = "-" if rounded < 0 else ""
        if show_symbol:
            return f"{sign}{self.currency_symbol}{formatted}"
        return f"{sign}{formatted}"

    def format_percentage(self, value: float, decimal_places: int = 2) -> str:
        """
        Format an already-scaled percentage (4.5 -> "4.50%").

        YearRecord.percent_of_balance_withdrawn is stored this way.
        """
        return f"{value:.{decimal_places}f}%"

    def format_rate(self, rate: float, decimal_places: int = 1) -> str:
        """Format a fractional rate (0.055 -> "5.5%")."""
        return self.format_percentage(rate * 100, decimal_places)

    def format_record(self, record: YearRecord) -> Dict[str, str]:
        """
        Format one projection year as a table row.

        Returns:
            Column name to display string
        """
        return {
            "year": str(record.year),
            "withdrawal": self.format_currency(record.gross_withdrawal),
            "taxes": self.format_currency(record.taxes_paid),
            "net_spending": self.format_currency(record.net_spending_available),
            "total_balance": self.format_currency(record.ending_total_balance),
            "percent_withdrawn": self.format_percentage(
                record.percent_of_balance_withdrawn
            ),
            "monthly_net": self.format_currency(record.monthly_net_spending),
        }

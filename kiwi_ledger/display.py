"""Formatting helpers for the ledger page."""

from fractions import Fraction
from typing import Optional, Union

from kiwi_ledger.models.entry import format_ledger_date

UNDEFINED_PERCENTAGE = "n/a"


def format_currency(value: float, symbol: str = "$") -> str:
    """Format a number like the sheet does: ``$1,234.50``, ``-$5.00``."""
    rounded = round(value, 2)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_percentage(value: Optional[int]) -> str:
    """``56%``, or ``n/a`` when the share is undefined."""
    if value is None:
        return UNDEFINED_PERCENTAGE
    return f"{value}%"


def format_fraction(value: Union[Fraction, float]) -> str:
    """``1/3`` for one third; whole numbers print without a denominator."""
    fraction = value if isinstance(value, Fraction) else Fraction(value).limit_denominator(100)
    if fraction.denominator == 1:
        return str(fraction.numerator)
    return f"{fraction.numerator}/{fraction.denominator}"


__all__ = [
    "UNDEFINED_PERCENTAGE",
    "format_currency",
    "format_fraction",
    "format_ledger_date",
    "format_percentage",
]

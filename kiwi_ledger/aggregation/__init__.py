"""Ledger aggregation package."""

from kiwi_ledger.aggregation.aggregator import (
    grand_total,
    parse_amount,
    percentage,
    split_share,
    summarize,
    totals,
)

__all__ = [
    "grand_total",
    "parse_amount",
    "percentage",
    "split_share",
    "summarize",
    "totals",
]

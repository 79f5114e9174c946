"""
Ledger Aggregation

Deterministic arithmetic over validated entries:
- per-participant totals for a fixed roster
- the grand total across every entry
- each participant's percentage share
- fractional split amounts for a single entry

DESIGN DECISION: Amounts are parsed best-effort. The sheet holds
currency strings typed by people ("$1,234.50", "12", "abc"), so a string
that does not read as a number contributes 0 instead of failing the
whole page. Totals are floats and are only ever meant for display.
"""

import math
import re
from collections.abc import Iterable, Sequence
from typing import Optional

from kiwi_ledger.models.entry import LedgerEntry
from kiwi_ledger.models.summary import LedgerSummary, ParticipantTotal


_STRIP_RE = re.compile(r"[$,]")
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_amount(amount: Optional[str]) -> float:
    """
    Best-effort numeric value of a display amount.

    Removes every "$" and ",", then reads the leading number, so
    "$1,234.50" -> 1234.5 and "12 (cash)" -> 12.0. Anything without a
    leading number, or whose value is not finite, yields 0.0.
    """
    if not amount:
        return 0.0

    cleaned = _STRIP_RE.sub("", amount).strip()
    match = _LEADING_NUMBER_RE.match(cleaned)
    if match is None:
        return 0.0

    value = float(match.group(0))
    if not math.isfinite(value):
        return 0.0
    return value


def totals(
    entries: Iterable[LedgerEntry],
    roster: Sequence[str],
) -> dict[str, float]:
    """
    Sum amounts per roster participant.

    Every roster name is present in the result, in roster order, even
    with no entries. Entries whose ``who`` is not exactly a roster name
    are left out.
    """
    result = {name: 0.0 for name in roster}
    for entry in entries:
        if entry.who in result:
            result[entry.who] += parse_amount(entry.amount)
    return result


def grand_total(entries: Iterable[LedgerEntry]) -> float:
    """Sum of every entry's amount, whether or not ``who`` is on the roster."""
    return sum((parse_amount(entry.amount) for entry in entries), 0.0)


def percentage(total: float, grand_total: float) -> Optional[int]:
    """
    Share of ``grand_total`` represented by ``total``, as a whole percent.

    Rounds half away from zero. Returns None when the grand total is
    zero, or when the share is not a finite number: the share is
    undefined and it is up to the caller how to show that.
    """
    if grand_total == 0:
        return None
    share = total / grand_total * 100
    if not math.isfinite(share):
        return None
    return int(math.copysign(math.floor(abs(share) + 0.5), share))


def split_share(amount: str, fraction: float) -> float:
    """Portion of one entry's amount, e.g. ``split_share("$90.00", 1/3)``. Not rounded."""
    return parse_amount(amount) * float(fraction)


def summarize(
    entries: Sequence[LedgerEntry],
    roster: Sequence[str],
) -> LedgerSummary:
    """Build the totals table for the presentation layer."""
    per_person = totals(entries, roster)
    overall = grand_total(entries)

    return LedgerSummary(
        participants=[
            ParticipantTotal(
                name=name,
                total=total,
                percentage=percentage(total, overall),
            )
            for name, total in per_person.items()
        ],
        grand_total=overall,
        entry_count=len(entries),
    )

"""
Record Normalizer

Turns raw sheet rows into validated LedgerEntry objects.

Each row goes through two steps:

STEP 1 - DECODE:
- Read exactly four positions: date, amount, who, notes
- Missing positions become None instead of raising IndexError
- Numbers become strings, whitespace is stripped, blanks become None

STEP 2 - VALIDATE:
- date, amount and who are required
- date must parse as "d MMM yyyy" (e.g. "5 Jan 2024")
- notes is optional

IMPORTANT: Validation never raises and never logs. Every field problem in
a row is collected into a single RowError and the batch carries on; the
caller decides how to report the errors.
"""

import re
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Optional

from kiwi_ledger.models.entry import (
    MONTH_ABBREVIATIONS,
    EmptyField,
    FieldError,
    InvalidDate,
    LedgerEntry,
    NormalizationResult,
    RowCells,
    RowError,
)


ROW_WIDTH = len(RowCells._fields)

_DATE_RE = re.compile(r"^(\d{1,2}) ([A-Za-z]{3}) (\d{4})$", re.ASCII)
_MONTHS = {name.lower(): index for index, name in enumerate(MONTH_ABBREVIATIONS, start=1)}


def _clean_cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


def decode_row(row: Optional[Sequence[Any]]) -> RowCells:
    """
    Decode one raw row into a fixed-width RowCells.

    Rows shorter than four cells are padded with None; cells past the
    fourth are ignored.
    """
    cells = list(row or [])[:ROW_WIDTH]
    cells.extend([None] * (ROW_WIDTH - len(cells)))
    return RowCells(*(_clean_cell(cell) for cell in cells))


def parse_ledger_date(value: str) -> date:
    """
    Parse a sheet date such as ``5 Jan 2024``.

    The month abbreviation is matched case-insensitively. Raises
    ValueError for anything that is not a real calendar date in that
    format.
    """
    match = _DATE_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Date {value!r} does not match 'd MMM yyyy'")

    day, month_name, year = match.groups()
    month = _MONTHS.get(month_name.lower())
    if month is None:
        raise ValueError(f"Unknown month abbreviation: {month_name!r}")

    # date() rejects impossible days such as 31 Feb
    return date(int(year), month, int(day))


def validate_cells(cells: RowCells) -> tuple[Optional[date], list[FieldError]]:
    """
    Validate decoded cells.

    Returns: (parsed_date, list_of_field_errors)
    The parsed date is None whenever the date field failed.
    """
    errors: list[FieldError] = []
    parsed_date = None

    if cells.date is None:
        errors.append(EmptyField(field="date"))
    else:
        try:
            parsed_date = parse_ledger_date(cells.date)
        except ValueError:
            errors.append(InvalidDate(raw_value=cells.date))

    if cells.amount is None:
        errors.append(EmptyField(field="amount"))

    if cells.who is None:
        errors.append(EmptyField(field="who"))

    return parsed_date, errors


def normalize(rows: Iterable[Optional[Sequence[Any]]]) -> NormalizationResult:
    """
    Normalize data rows (header already removed).

    Valid rows become LedgerEntry objects in input order. Each invalid
    row becomes one RowError whose row_index is its 1-based position
    among the data rows.
    """
    entries: list[LedgerEntry] = []
    errors: list[RowError] = []

    for row_index, row in enumerate(rows, start=1):
        cells = decode_row(row)
        parsed_date, field_errors = validate_cells(cells)

        if field_errors:
            errors.append(RowError(
                row_index=row_index,
                raw_row=cells,
                field_errors=field_errors,
            ))
            continue

        entries.append(LedgerEntry(
            date=parsed_date,
            amount=cells.amount,
            who=cells.who,
            notes=cells.notes or "",
        ))

    return NormalizationResult(entries=entries, errors=errors)

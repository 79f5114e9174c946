"""
Core Data Models for Kiwi Ledger

These models define the schemas for everything read from or written to
the ledger sheet. They are designed to:
1. Separate untyped sheet cells from validated entries
2. Carry validation failures as data instead of exceptions
3. Be serializable for logging and display

DESIGN DECISION: Amounts stay strings. The sheet holds display-formatted
currency ("$1,234.50") typed by people, so an entry keeps exactly what was
typed and numeric interpretation is left to the aggregator.
"""

import datetime
from enum import Enum
from typing import Annotated, Literal, NamedTuple, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# Column order of the ledger sheet
LEDGER_COLUMNS = ["Date", "Amount", "Who", "Notes"]

# Human-readable form of the sheet's date format
LEDGER_DATE_PATTERN = "d MMM yyyy"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_ledger_date(value: datetime.date) -> str:
    """Format a date the way the sheet stores it, e.g. ``5 Jan 2024``."""
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year:04d}"


class RowCells(NamedTuple):
    """
    Fixed-width view of one sheet row.

    A cell is None when the sheet had nothing in that position.
    """
    date: Optional[str]
    amount: Optional[str]
    who: Optional[str]
    notes: Optional[str]


# =============================================================================
# FIELD ERRORS - collected per row, never raised
# =============================================================================

class FieldErrorKind(str, Enum):
    """Kinds of field-level validation failure."""
    EMPTY_FIELD = "empty_field"
    INVALID_DATE = "invalid_date"


class FieldError(BaseModel):
    """A single field that failed validation."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(
        ...,
        description="Name of the failing field (date, amount, who)"
    )
    kind: FieldErrorKind

    @property
    def message(self) -> str:
        return f"{self.field} is invalid"


class EmptyField(FieldError):
    """A required field was missing or blank."""

    kind: Literal[FieldErrorKind.EMPTY_FIELD] = FieldErrorKind.EMPTY_FIELD

    @property
    def message(self) -> str:
        return f"{self.field.capitalize()} cannot be empty"


class InvalidDate(FieldError):
    """The date cell did not parse as ``d MMM yyyy``."""

    field: str = "date"
    kind: Literal[FieldErrorKind.INVALID_DATE] = FieldErrorKind.INVALID_DATE
    raw_value: str

    @property
    def message(self) -> str:
        return (
            f"Invalid date: {self.raw_value}. "
            f"Could not parse with format '{LEDGER_DATE_PATTERN}'."
        )


AnyFieldError = Annotated[
    Union[EmptyField, InvalidDate],
    Field(discriminator="kind"),
]


class RowError(BaseModel):
    """
    Every validation failure for one sheet row.

    A row with several bad fields produces one RowError listing all of
    them, not one error per field.
    """
    model_config = ConfigDict(frozen=True)

    row_index: int = Field(
        ...,
        ge=1,
        description="1-based position among the data rows (header excluded)"
    )
    raw_row: RowCells = Field(
        ...,
        description="The decoded cells of the offending row"
    )
    field_errors: list[AnyFieldError] = Field(
        ...,
        min_length=1,
    )

    @property
    def fields(self) -> list[str]:
        """Names of the failing fields, in column order."""
        return [error.field for error in self.field_errors]

    def describe(self) -> str:
        messages = "; ".join(error.message for error in self.field_errors)
        return f"Row {self.row_index}: {messages}"


# =============================================================================
# LEDGER ENTRIES
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One validated expense row.

    Only the date is converted; amount and who are kept as typed.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    date: datetime.date = Field(
        ...,
        description="Date of the expense"
    )
    amount: str = Field(
        ...,
        min_length=1,
        description="Amount as displayed in the sheet, e.g. '$1,234.50'"
    )
    who: str = Field(
        ...,
        min_length=1,
        description="Participant who paid"
    )
    notes: str = Field(
        default="",
        description="Free-text description"
    )


class NormalizationResult(BaseModel):
    """
    Outcome of normalizing a batch of rows.

    Partial success is the expected case: valid rows land in ``entries``
    while every rejected row lands in ``errors``.
    """

    entries: list[LedgerEntry] = Field(default_factory=list)
    errors: list[RowError] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def error_summary(self) -> Optional[str]:
        """One line per rejected row, or None when every row was valid."""
        if not self.errors:
            return None
        return "\n".join(error.describe() for error in self.errors)


class NewEntry(BaseModel):
    """
    Payload for one row appended to the sheet.

    Produced by the add-entry form; the storage layer writes ``to_row()``.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: datetime.date
    amount: str = Field(
        ...,
        min_length=1,
        max_length=50,
    )
    who: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    notes: str = Field(
        default="",
        max_length=1000,
    )

    @field_validator('notes', mode='before')
    @classmethod
    def default_notes(cls, v: Optional[str]) -> str:
        return v or ""

    def to_row(self) -> list[str]:
        """Cells in sheet column order: date, amount, who, notes."""
        return [
            format_ledger_date(self.date),
            self.amount,
            self.who,
            self.notes,
        ]

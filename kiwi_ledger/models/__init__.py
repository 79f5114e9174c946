"""
Data Models Package

This package contains all Pydantic models used in Kiwi Ledger.
All data flowing between the sheet, the core and the page conforms to these schemas.
"""

from kiwi_ledger.models.entry import (
    LEDGER_COLUMNS,
    LEDGER_DATE_PATTERN,
    EmptyField,
    FieldError,
    FieldErrorKind,
    InvalidDate,
    LedgerEntry,
    NewEntry,
    NormalizationResult,
    RowCells,
    RowError,
    format_ledger_date,
)
from kiwi_ledger.models.summary import LedgerSummary, ParticipantTotal
from kiwi_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "LEDGER_COLUMNS",
    "LEDGER_DATE_PATTERN",
    "EmptyField",
    "FieldError",
    "FieldErrorKind",
    "InvalidDate",
    "LedgerEntry",
    "NewEntry",
    "NormalizationResult",
    "RowCells",
    "RowError",
    "format_ledger_date",
    # Summary models
    "LedgerSummary",
    "ParticipantTotal",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Audit Models for Kiwi Ledger

Significant actions against the shared sheet are recorded as typed
events so a load or an append can be traced in the logs afterwards.

Events are written to the local structured log only; the ledger sheet
is never used as an audit store.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Reading
    LEDGER_LOADED = "ledger_loaded"
    ROWS_REJECTED = "rows_rejected"

    # Writing
    ENTRY_APPENDED = "entry_appended"

    # Failures
    SOURCE_ERROR = "source_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Correlation - ties together the events of one page render or submit
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.ledger_loaded(entry_count, rejected_count)
        event = AuditEventBuilder.entry_appended(row, correlation_id)
    """

    @staticmethod
    def ledger_loaded(
        entry_count: int,
        rejected_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            correlation_id=correlation_id,
            description=f"Ledger loaded: {entry_count} entries, {rejected_count} rejected rows",
            details={
                "entry_count": entry_count,
                "rejected_count": rejected_count,
            },
        )

    @staticmethod
    def rows_rejected(
        row_errors: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROWS_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Errors encountered while parsing {len(row_errors)} sheet rows",
            details={
                "rows": row_errors,
            },
        )

    @staticmethod
    def entry_appended(
        row: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_APPENDED,
            correlation_id=correlation_id,
            description=f"Entry appended: {row[2]} - {row[1]} on {row[0]}",
            details={
                "row": row,
            },
            is_user_action=True,
        )

    @staticmethod
    def source_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Record source error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

"""
Audit Logger

Every load of the ledger and every appended entry is logged.
This provides:
1. A record of rows the normalizer rejected, so they can be fixed in the sheet
2. Traceability of who added what, and when
3. Debugging information when the Google API fails

The audit logger:
- Writes structured JSON lines through structlog
- Never raises; a logging failure must not break a page render
- Supports correlation IDs to tie a load and a submit together
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from kiwi_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from kiwi_ledger.models.entry import RowError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route the structured log to stderr at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Events go to the local structured log only.
    """

    def __init__(self, logger_name: str = "kiwi_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at the event's severity.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)
            return False

        return True

    def log_ledger_loaded(
        self,
        entry_count: int,
        rejected_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful ledger read."""
        event = AuditEventBuilder.ledger_loaded(
            entry_count=entry_count,
            rejected_count=rejected_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_rows_rejected(
        self,
        errors: list[RowError],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rows the normalizer refused, one detail record per row."""
        if not errors:
            return
        row_errors = [
            {
                "row_index": error.row_index,
                "row_data": list(error.raw_row),
                "errors": [e.message for e in error.field_errors],
            }
            for error in errors
        ]
        event = AuditEventBuilder.rows_rejected(
            row_errors=row_errors,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_entry_appended(
        self,
        row: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an entry appended from the form."""
        event = AuditEventBuilder.entry_appended(
            row=row,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_source_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed read or write against the record source."""
        event = AuditEventBuilder.source_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a page render or form submit.
    """
    return uuid4()

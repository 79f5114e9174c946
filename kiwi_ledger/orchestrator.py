"""
Main Orchestrator for Kiwi Ledger

Ties together the record source, the normalizer, the aggregator and the
audit log, and defines the two flows the ledger page needs:
1. Load (sheet rows → normalize → summarize → view)
2. Add entry (form values → NewEntry → append to sheet)

DESIGN DECISION: The normalizer and aggregator stay pure. Everything
with side effects (reading the sheet, writing the sheet, logging
rejected rows) happens here, so the core can be tested without mocks.

Failures of the record source are logged and re-raised unchanged; the
page decides what to show. Rejected rows are never fatal.
"""

import datetime
from collections.abc import Sequence
from fractions import Fraction
from typing import Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field

from kiwi_ledger.aggregation import split_share, summarize
from kiwi_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from kiwi_ledger.config import get_settings
from kiwi_ledger.models.entry import LedgerEntry, NewEntry, RowError
from kiwi_ledger.models.summary import LedgerSummary
from kiwi_ledger.normalization import normalize
from kiwi_ledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerSource,
    LedgerSourceInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class LedgerView(BaseModel):
    """Everything the ledger page renders after one load."""

    entries: list[LedgerEntry] = Field(
        default_factory=list,
        description="Valid entries, newest first"
    )
    errors: list[RowError] = Field(default_factory=list)
    summary: LedgerSummary = Field(default_factory=LedgerSummary)

    @property
    def is_empty(self) -> bool:
        return not self.entries


class SplitShare(BaseModel):
    """One fractional share of a single entry."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    fraction: Fraction
    amount: float


class LedgerFlow:
    """
    Orchestrates reading and appending ledger rows.

    Flow (load):
    1. Fetch data rows from the record source (header already removed)
    2. Normalize → entries + per-row errors
    3. Log rejected rows as a warning
    4. Summarize entries against the roster
    5. Return entries newest first for display
    """

    def __init__(
        self,
        source: Optional[LedgerSourceInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        roster: Optional[Sequence[str]] = None,
        split_fractions: Optional[Sequence[Fraction]] = None,
    ):
        self._source = source
        self._audit_logger = audit_logger or AuditLogger()

        if roster is None or split_fractions is None:
            ledger_settings = get_settings().ledger
            roster = roster if roster is not None else ledger_settings.roster_list
            split_fractions = (
                split_fractions
                if split_fractions is not None
                else ledger_settings.split_fraction_list
            )

        self._roster = list(roster)
        self._split_fractions = list(split_fractions)

    @property
    def roster(self) -> list[str]:
        return list(self._roster)

    @property
    def split_fractions(self) -> list[Fraction]:
        return list(self._split_fractions)

    def _require_source(self) -> LedgerSourceInterface:
        if self._source is None:
            raise StorageError(
                "The ledger sheet isn't configured. "
                "Set GOOGLE_SHEETS_CREDENTIALS_PATH and GOOGLE_SHEETS_SPREADSHEET_ID."
            )
        return self._source

    async def load_ledger(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerView:
        """
        Read, validate and summarize the whole ledger.

        Raises:
            StorageError: If the sheet could not be read
        """
        correlation_id = correlation_id or create_correlation_id()
        source = self._require_source()

        try:
            rows = await source.fetch_rows()
        except StorageError as e:
            self._audit_logger.log_source_error(
                operation="fetch_rows",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        result = normalize(rows)

        if result.has_errors:
            self._audit_logger.log_rows_rejected(
                result.errors,
                correlation_id=correlation_id,
            )

        summary = summarize(result.entries, self._roster)

        self._audit_logger.log_ledger_loaded(
            entry_count=len(result.entries),
            rejected_count=result.error_count,
            correlation_id=correlation_id,
        )

        return LedgerView(
            # sorted() is stable, so same-day entries keep sheet order
            entries=sorted(result.entries, key=lambda e: e.date, reverse=True),
            errors=result.errors,
            summary=summary,
        )

    async def add_entry(
        self,
        entry_date: datetime.date,
        amount: str,
        who: str,
        notes: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> NewEntry:
        """
        Append one entry to the sheet.

        Raises:
            pydantic.ValidationError: If amount or who is blank
            StorageError: If the sheet could not be written
        """
        correlation_id = correlation_id or create_correlation_id()

        entry = NewEntry(
            date=entry_date,
            amount=amount,
            who=who,
            notes=notes,
        )
        source = self._require_source()

        try:
            await source.append_entry(entry)
        except StorageError as e:
            self._audit_logger.log_source_error(
                operation="append_entry",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_entry_appended(
            row=entry.to_row(),
            correlation_id=correlation_id,
        )
        return entry

    def split(
        self,
        entry: LedgerEntry,
        fractions: Optional[Sequence[Fraction]] = None,
    ) -> list[SplitShare]:
        """Fractional shares of one entry, one per configured fraction."""
        fractions = self._split_fractions if fractions is None else fractions
        return [
            SplitShare(fraction=fraction, amount=split_share(entry.amount, fraction))
            for fraction in fractions
        ]


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize the Google Sheets source.
                    Set to False to run without a sheet.

    Returns:
        (ledger_flow, sheets_client)
    """
    configure_logging(get_settings().app.log_level)

    sheets_client = None
    source = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            source = GoogleSheetsLedgerSource(sheets_client)
        except Exception as e:
            # Sheet not configured - the page shows a configuration error
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            source = None

    ledger_flow = LedgerFlow(
        source=source,
        audit_logger=AuditLogger(),
    )

    return ledger_flow, sheets_client

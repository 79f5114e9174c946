"""
Shared fixtures for Kiwi Ledger tests.

No test talks to Google: the orchestrator runs against an in-memory
record source and storage tests use mocked gspread objects.
"""

from fractions import Fraction
from typing import Any

import pytest

from kiwi_ledger.audit import AuditLogger
from kiwi_ledger.models.audit import AuditEvent
from kiwi_ledger.models.entry import NewEntry
from kiwi_ledger.orchestrator import LedgerFlow
from kiwi_ledger.services.storage import LedgerSourceInterface, StorageError


ROSTER = ["Tyler", "Melissa"]


class InMemoryLedgerSource(LedgerSourceInterface):
    """Record source backed by a list of rows (header excluded)."""

    def __init__(self, rows: list[list[Any]] = None):
        self.rows = [list(row) for row in (rows or [])]
        self.fail_reads = False
        self.fail_writes = False

    async def fetch_rows(self) -> list[list[Any]]:
        if self.fail_reads:
            raise StorageError("Failed to fetch data from Google Sheets. quota exceeded")
        return [list(row) for row in self.rows]

    async def append_entry(self, entry: NewEntry) -> bool:
        if self.fail_writes:
            raise StorageError("Failed to add data to Google Sheets. permission denied")
        self.rows.append(entry.to_row())
        return True


class RecordingAuditLogger(AuditLogger):
    """Audit logger that keeps events in memory instead of writing them."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    @property
    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture
def sheet_rows():
    """Data rows as the Sheets API returns them: strings, trailing blanks dropped."""
    return [
        ["5 Jan 2024", "$10.00", "Tyler", "Groceries"],
        ["7 Jan 2024", "$5.00", "Melissa"],
        ["", "$4.00", "Tyler", "No date"],
        ["9 Jan 2024", "$3.00", "Unknown", "Guest"],
        ["6 Jan 2024", "abc", "Melissa", "Typo"],
    ]


@pytest.fixture
def source(sheet_rows):
    return InMemoryLedgerSource(sheet_rows)


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()


@pytest.fixture
def ledger_flow(source, audit_logger):
    return LedgerFlow(
        source=source,
        audit_logger=audit_logger,
        roster=ROSTER,
        split_fractions=[Fraction(1, 3), Fraction(2, 3)],
    )

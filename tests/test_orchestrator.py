"""Tests for the load and add-entry flows."""

import asyncio
from datetime import date
from fractions import Fraction

import pytest
from pydantic import ValidationError

from kiwi_ledger.models.audit import AuditEventType, AuditSeverity
from kiwi_ledger.models.entry import LedgerEntry
from kiwi_ledger.orchestrator import LedgerFlow
from kiwi_ledger.services.storage import StorageError


class TestLoadLedger:
    """Tests for LedgerFlow.load_ledger."""

    def test_entries_are_newest_first(self, ledger_flow):
        view = asyncio.run(ledger_flow.load_ledger())
        assert [e.date for e in view.entries] == [
            date(2024, 1, 9),
            date(2024, 1, 7),
            date(2024, 1, 6),
            date(2024, 1, 5),
        ]

    def test_same_day_entries_keep_sheet_order(self, source, ledger_flow):
        source.rows = [
            ["5 Jan 2024", "$1", "Tyler", "first"],
            ["5 Jan 2024", "$2", "Tyler", "second"],
        ]
        view = asyncio.run(ledger_flow.load_ledger())
        assert [e.notes for e in view.entries] == ["first", "second"]

    def test_summary(self, ledger_flow):
        view = asyncio.run(ledger_flow.load_ledger())

        # "abc" for Melissa counts as zero; "Unknown" counts only in the grand total
        assert view.summary.totals == {"Tyler": 10.0, "Melissa": 5.0}
        assert view.summary.grand_total == pytest.approx(18.0)
        assert [p.percentage for p in view.summary.participants] == [56, 28]

    def test_bad_rows_are_reported_not_fatal(self, ledger_flow):
        view = asyncio.run(ledger_flow.load_ledger())

        assert len(view.entries) == 4
        assert len(view.errors) == 1
        assert view.errors[0].row_index == 3
        assert [e.describe() for e in view.errors] == ["Row 3: Date cannot be empty"]

    def test_rejected_rows_are_logged_as_warning(self, ledger_flow, audit_logger):
        asyncio.run(ledger_flow.load_ledger())

        assert audit_logger.event_types == ["rows_rejected", "ledger_loaded"]
        rejected = audit_logger.events[0]
        assert rejected.severity == AuditSeverity.WARNING
        assert rejected.details["rows"][0]["row_index"] == 3
        assert rejected.details["rows"][0]["errors"] == ["Date cannot be empty"]

    def test_clean_load_logs_only_loaded(self, source, ledger_flow, audit_logger):
        source.rows = [["5 Jan 2024", "$1", "Tyler"]]

        asyncio.run(ledger_flow.load_ledger())

        assert audit_logger.event_types == ["ledger_loaded"]
        assert audit_logger.events[0].details == {"entry_count": 1, "rejected_count": 0}

    def test_empty_sheet(self, source, ledger_flow):
        source.rows = []

        view = asyncio.run(ledger_flow.load_ledger())

        assert view.is_empty
        assert view.errors == []
        assert view.summary.totals == {"Tyler": 0, "Melissa": 0}

    def test_source_failure_is_logged_and_raised(self, source, ledger_flow, audit_logger):
        source.fail_reads = True

        with pytest.raises(StorageError, match="quota exceeded"):
            asyncio.run(ledger_flow.load_ledger())

        assert audit_logger.event_types == ["source_error"]
        assert audit_logger.events[0].details == {"operation": "fetch_rows"}

    def test_failure_does_not_block_next_load(self, source, ledger_flow):
        source.fail_reads = True
        with pytest.raises(StorageError):
            asyncio.run(ledger_flow.load_ledger())

        source.fail_reads = False
        view = asyncio.run(ledger_flow.load_ledger())
        assert len(view.entries) == 4

    def test_no_source_configured(self, audit_logger):
        flow = LedgerFlow(
            source=None,
            audit_logger=audit_logger,
            roster=["Tyler", "Melissa"],
            split_fractions=[],
        )

        with pytest.raises(StorageError, match="isn't configured"):
            asyncio.run(flow.load_ledger())

    def test_correlation_id_is_shared(self, ledger_flow, audit_logger):
        asyncio.run(ledger_flow.load_ledger())

        ids = {event.correlation_id for event in audit_logger.events}
        assert len(ids) == 1
        assert None not in ids


class TestAddEntry:
    """Tests for LedgerFlow.add_entry."""

    def test_appends_formatted_row(self, source, ledger_flow):
        entry = asyncio.run(
            ledger_flow.add_entry(
                entry_date=date(2024, 2, 3),
                amount="$42.00",
                who="Melissa",
                notes="Dinner",
            )
        )

        assert source.rows[-1] == ["3 Feb 2024", "$42.00", "Melissa", "Dinner"]
        assert entry.who == "Melissa"

    def test_missing_notes_become_empty_string(self, source, ledger_flow):
        asyncio.run(
            ledger_flow.add_entry(entry_date=date(2024, 2, 3), amount="$1", who="Tyler")
        )
        assert source.rows[-1][3] == ""

    def test_appended_entry_is_visible_on_next_load(self, source, ledger_flow):
        asyncio.run(
            ledger_flow.add_entry(entry_date=date(2024, 3, 1), amount="$6.00", who="Tyler")
        )

        view = asyncio.run(ledger_flow.load_ledger())

        assert view.entries[0].date == date(2024, 3, 1)
        assert view.summary.totals["Tyler"] == pytest.approx(16.0)

    def test_logs_user_action(self, ledger_flow, audit_logger):
        asyncio.run(
            ledger_flow.add_entry(entry_date=date(2024, 2, 3), amount="$1", who="Tyler")
        )

        assert audit_logger.event_types == ["entry_appended"]
        event = audit_logger.events[0]
        assert event.is_user_action is True
        assert event.details["row"] == ["3 Feb 2024", "$1", "Tyler", ""]

    @pytest.mark.parametrize(
        "amount, who",
        [("", "Tyler"), ("   ", "Tyler"), ("$1", "")],
    )
    def test_blank_required_fields_are_rejected(self, source, ledger_flow, amount, who):
        before = list(source.rows)

        with pytest.raises(ValidationError):
            asyncio.run(
                ledger_flow.add_entry(entry_date=date(2024, 2, 3), amount=amount, who=who)
            )

        assert source.rows == before

    def test_write_failure_is_logged_and_raised(self, source, ledger_flow, audit_logger):
        source.fail_writes = True

        with pytest.raises(StorageError, match="permission denied"):
            asyncio.run(
                ledger_flow.add_entry(entry_date=date(2024, 2, 3), amount="$1", who="Tyler")
            )

        assert audit_logger.event_types == ["source_error"]
        assert audit_logger.events[0].event_type == AuditEventType.SOURCE_ERROR


class TestSplit:
    """Tests for splitting one entry."""

    def test_default_fractions(self, ledger_flow):
        entry = LedgerEntry(date=date(2024, 1, 5), amount="$90.00", who="Tyler")

        shares = ledger_flow.split(entry)

        assert [s.fraction for s in shares] == [Fraction(1, 3), Fraction(2, 3)]
        assert [s.amount for s in shares] == [pytest.approx(30.0), pytest.approx(60.0)]

    def test_custom_fractions(self, ledger_flow):
        entry = LedgerEntry(date=date(2024, 1, 5), amount="$90.00", who="Tyler")

        shares = ledger_flow.split(entry, [Fraction(1, 2)])

        assert len(shares) == 1
        assert shares[0].amount == pytest.approx(45.0)

    def test_roster_comes_from_constructor(self, audit_logger):
        flow = LedgerFlow(
            source=None,
            audit_logger=audit_logger,
            roster=["Ana"],
            split_fractions=[Fraction(1, 2)],
        )
        assert flow.roster == ["Ana"]
        assert flow.split_fractions == [Fraction(1, 2)]

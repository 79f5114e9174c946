"""
Abstract Record Source Interface

DESIGN DECISION: The ledger reads and writes through an abstract source.
This allows us to:
1. Keep the normalizer and aggregator free of any Google API types
2. Use an in-memory source in tests
3. Swap Google Sheets for something else later

The interface is intentionally tiny: read every data row, append one row.
"""

from abc import ABC, abstractmethod
from typing import Any

from kiwi_ledger.models.entry import NewEntry


class LedgerSourceInterface(ABC):
    """
    Abstract interface for the ledger's record source.

    Any backend (Google Sheets, CSV, database) must implement these methods.
    """

    @abstractmethod
    async def fetch_rows(self) -> list[list[Any]]:
        """
        Read every data row of the ledger table.

        The header row is NOT included. Rows are returned as the backend
        provides them: variable length, loosely typed cells.

        Returns:
            List of raw rows in sheet order

        Raises:
            StorageError: If the source cannot be read
        """
        pass

    @abstractmethod
    async def append_entry(self, entry: NewEntry) -> bool:
        """
        Append one entry as a new row at the end of the table.

        Args:
            entry: The validated entry to write

        Returns:
            True if appended successfully

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for record source operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to or authenticate with the storage backend."""
    pass


class MalformedResponseError(StorageError):
    """The backend answered with data of an unexpected shape."""
    pass

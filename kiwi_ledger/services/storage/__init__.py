"""
Storage Services Package

Provides the abstract record source interface and its Google Sheets
implementation.
"""

from kiwi_ledger.services.storage.interface import (
    ConnectionError,
    LedgerSourceInterface,
    MalformedResponseError,
    StorageError,
)
from kiwi_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerSource,
)

__all__ = [
    # Interfaces
    "LedgerSourceInterface",
    # Exceptions
    "ConnectionError",
    "MalformedResponseError",
    "StorageError",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsLedgerSource",
]

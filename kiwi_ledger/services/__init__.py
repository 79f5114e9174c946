"""Services package."""

from kiwi_ledger.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsLedgerSource,
    LedgerSourceInterface,
    MalformedResponseError,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerSource",
    "LedgerSourceInterface",
    "MalformedResponseError",
    "StorageError",
]

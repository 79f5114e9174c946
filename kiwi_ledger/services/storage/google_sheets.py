"""
Google Sheets Record Source

DESIGN DECISION: The ledger lives in a shared Google Sheet because:
1. Everyone in the household can view and fix rows directly in Sheets
2. No database setup required
3. Built-in history and backup

TRADEOFFS:
- No transactions; two people appending at once get two rows, in either order
- Cells are whatever people typed, so every read goes through the normalizer
- The whole A:D range is read on every page load (fine for a household ledger)
"""

from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kiwi_ledger.config import GoogleSheetsSettings, get_settings
from kiwi_ledger.models.entry import LEDGER_COLUMNS, NewEntry
from kiwi_ledger.services.storage.interface import (
    ConnectionError,
    LedgerSourceInterface,
    MalformedResponseError,
    StorageError,
)


SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def describe_error(error: Exception) -> str:
    """Best human-readable message for an exception raised by gspread."""
    if isinstance(error, gspread.exceptions.APIError):
        details = getattr(error, "error", None)
        if isinstance(details, dict) and details.get("message"):
            return f"Google API Error: {details['message']}"
    return str(error)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication. Only
        Google API errors are retried; a missing or unreadable key file
        fails straight away.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
                self._client = gspread.authorize(credentials)
            except gspread.exceptions.APIError:
                raise
            except FileNotFoundError:
                raise ConnectionError(
                    "Service account key file not found at "
                    f"{self._settings.credentials_path}. "
                    "Please ensure it exists and the path is correct."
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.worksheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.worksheet_name,
                rows=1000,
                cols=len(LEDGER_COLUMNS),
            )
            sheet.append_row(LEDGER_COLUMNS)
        return sheet


class GoogleSheetsLedgerSource(LedgerSourceInterface):
    """
    Google Sheets implementation of the ledger record source.

    One ledger entry per row, columns A:D = Date, Amount, Who, Notes.
    Row 1 is the header and is never returned.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @property
    def value_range(self) -> str:
        return self._client.settings.value_range

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _read_values(self) -> Any:
        sheet = self._client.get_ledger_sheet()
        return sheet.get(self.value_range)

    async def fetch_rows(self) -> list[list[Any]]:
        """Read every data row from the ledger sheet."""
        try:
            values = self._read_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to fetch data from Google Sheets. {describe_error(e)}"
            ) from e

        if values is None:
            return []
        if not isinstance(values, list):
            raise MalformedResponseError(
                f"Expected a list of rows from Google Sheets, got {type(values).__name__}"
            )

        rows = []
        # Skip header
        for position, row in enumerate(values[1:], start=2):
            if not isinstance(row, list):
                raise MalformedResponseError(
                    f"Sheet row {position} is {type(row).__name__}, expected a list of cells"
                )
            rows.append(list(row))
        return rows

    async def append_entry(self, entry: NewEntry) -> bool:
        """Append one entry after the last row of the ledger table."""
        try:
            sheet = self._client.get_ledger_sheet()
            sheet.append_row(
                entry.to_row(),
                value_input_option="USER_ENTERED",
                table_range=self.value_range,
            )
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to add data to Google Sheets. {describe_error(e)}"
            ) from e

"""
Configuration Management for Kiwi Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The normalizer and aggregator never read it directly; the orchestrator
and storage layer pass the values they need down to them.
"""

from fractions import Fraction
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets record source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet holding the ledger"
    )
    worksheet_name: str = Field(
        default="Sheet1",
        description="Name of the worksheet holding ledger rows"
    )
    value_range: str = Field(
        default="A:D",
        description="Columns read per row: date, amount, who, notes"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class LedgerSettings(BaseSettings):
    """Ledger roster and display configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    roster: str = Field(
        default="Tyler,Melissa",
        description="Comma-separated list of participants shown in the totals table"
    )
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        description="Symbol prefixed to formatted amounts"
    )
    split_fractions: str = Field(
        default="1/3,2/3",
        description="Comma-separated fractions offered in the split view"
    )

    @field_validator('roster')
    @classmethod
    def validate_roster(cls, v: str) -> str:
        names = [name.strip() for name in v.split(",") if name.strip()]
        if not names:
            raise ValueError("Roster must name at least one participant")
        if len(set(names)) != len(names):
            raise ValueError(f"Roster contains duplicate names: {v}")
        return v

    @field_validator('split_fractions')
    @classmethod
    def validate_split_fractions(cls, v: str) -> str:
        for part in v.split(","):
            if not part.strip():
                continue
            try:
                value = Fraction(part.strip())
            except (ValueError, ZeroDivisionError):
                raise ValueError(f"Invalid split fraction: {part!r}")
            if not 0 < value <= 1:
                raise ValueError(f"Split fraction out of range (0, 1]: {part!r}")
        return v

    @property
    def roster_list(self) -> list[str]:
        """Get roster as an ordered list of names."""
        return [name.strip() for name in self.roster.split(",") if name.strip()]

    @property
    def split_fraction_list(self) -> list[Fraction]:
        """Get split fractions as Fraction objects, in configured order."""
        return [
            Fraction(part.strip())
            for part in self.split_fractions.split(",")
            if part.strip()
        ]


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level emitted by the structured logger"
    )
    app_title: str = Field(
        default="Kiwi Ledger",
        description="Title shown at the top of the ledger page"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the ledger page can still render
    # a configuration error when Google Sheets is not set up.

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    ``<setting_name>_error`` entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    sections = {
        "google_sheets": lambda: settings.google_sheets,
        "ledger": lambda: settings.ledger,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

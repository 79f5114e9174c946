"""
Summary Models

Plain-data results of aggregating ledger entries, handed to the
presentation layer as-is.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ParticipantTotal(BaseModel):
    """One row of the per-person totals table."""

    name: str
    total: float = Field(
        ...,
        description="Sum of the participant's best-effort amounts"
    )
    percentage: Optional[int] = Field(
        default=None,
        description="Rounded share of the grand total; None when the grand total is zero"
    )


class LedgerSummary(BaseModel):
    """
    Totals for the whole ledger.

    ``participants`` follows roster order and always contains every
    roster name, including those with no entries.
    """

    participants: list[ParticipantTotal] = Field(default_factory=list)
    grand_total: float = 0.0
    entry_count: int = Field(default=0, ge=0)

    @property
    def totals(self) -> dict[str, float]:
        return {p.name: p.total for p in self.participants}

    def for_participant(self, name: str) -> Optional[ParticipantTotal]:
        for participant in self.participants:
            if participant.name == name:
                return participant
        return None

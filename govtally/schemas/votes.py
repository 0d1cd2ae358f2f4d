"""Ballot and tally result schemas.

Defines the raw ballot shape supplied by the vote source, the normalized
Ballot record keyed by voter address, and the per-choice ChoiceResult
produced by the tally engine.
"""

from __future__ import annotations

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChoiceColor(StrEnum):
    """Semantic display category for well-known choice labels.

    Choices that match neither category are rendered with a numeric
    palette bucket (0-7) instead.
    """

    APPROVE = "approve"
    REJECT = "reject"


# A semantic color or a palette bucket in range 0..7
ColorCategory = ChoiceColor | int


class RawBallot(BaseModel):
    """A ballot as returned by the vote source, before power is resolved."""

    voter: str = Field(description="Voter address as reported by the source")
    choice: int = Field(description="1-based index into the proposal's choices")
    created: int = Field(
        description="Cast time in unix seconds (numeric strings are accepted)",
    )

    @field_validator("created", mode="before")
    @classmethod
    def _coerce_created(cls, value: object) -> int:
        if isinstance(value, str):
            value = float(value.strip())
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"created must be a finite timestamp, got {value}")
            return int(value)
        return value  # type: ignore[return-value]


class Ballot(BaseModel):
    """A single voter's ballot merged with its resolved voting power.

    Immutable once built. One Ballot per lowercased voter address.
    """

    model_config = ConfigDict(frozen=True)

    voter: str = Field(description="Lowercased voter address")
    choice: int = Field(description="1-based index into the proposal's choices")
    vp: float = Field(default=0, description="Resolved voting power of the voter")
    timestamp: int = Field(default=0, description="Cast time as reported by the source")

    @property
    def cast_at(self) -> int:
        """Alias for the cast timestamp."""
        return self.timestamp


class ChoiceResult(BaseModel):
    """Tally result for one proposal choice.

    Results are returned in the proposal's declared choice order. The
    progress values of one tally sum to exactly 100 when the proposal
    reached its required power and any power was cast.
    """

    choice: str = Field(description="Choice label as declared by the proposal")
    color: ColorCategory = Field(description="Semantic color or palette bucket")
    votes: int = Field(default=0, ge=0, description="Number of ballots cast for this choice")
    power: float = Field(default=0, description="Total voting power cast for this choice")
    progress: float = Field(
        default=0,
        description="Display percentage; may be fractional after remainder distribution",
    )

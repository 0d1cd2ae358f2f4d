"""Runtime settings for tallying and voting-power aggregation."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TallySettings(BaseModel):
    """Tunables for the voting-power aggregator and tally defaults.

    Loaded from defaults.toml and overridable per call.
    """

    batch_size: int = Field(
        default=500, gt=0, description="Addresses per scoring oracle request",
    )
    max_concurrency: int = Field(
        default=1, ge=1, le=32,
        description="Oracle batches in flight at once (1 = sequential)",
    )
    delegation_strategy: str = Field(
        default="delegation",
        description="Name of the strategy whose scores count as delegated power",
    )
    required_voting_power: float = Field(
        default=0, ge=0, description="Default quorum when a proposal sets none",
    )

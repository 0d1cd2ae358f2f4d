"""Voting-power oracle schemas.

Defines the shapes exchanged with the scoring oracle (strategy definitions,
per-strategy score maps, space metadata), the proposal reference used to
resolve scores, and the per-address ScoreBreakdown produced by the
aggregator.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StrategyDefinition(BaseModel):
    """A named scoring rule contributing one component of voting power."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Strategy identifier, e.g. 'erc20-balance-of' or 'delegation'")
    network: str = Field(default="", description="Network the strategy reads from")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Strategy-specific parameters",
    )


class ScoresResponse(BaseModel):
    """Oracle response: one address → score map per strategy.

    ``scores[i]`` holds the scores computed by ``strategies[i]``.
    """

    scores: list[dict[str, float | None]] = Field(
        default_factory=list, description="Per-strategy address → score maps",
    )
    strategies: list[StrategyDefinition] = Field(
        default_factory=list, description="Strategies in the same order as scores",
    )


class SpaceAndStrategies(BaseModel):
    """The space a proposal lives in and the strategies it was created with."""

    space: str = Field(default="", description="Space identifier")
    strategies: list[StrategyDefinition] = Field(
        default_factory=list, description="Strategies recorded on the proposal",
    )


class ProposalRef(BaseModel):
    """Proposal fields needed to tally and resolve voting power."""

    id: str = Field(default="", description="Governance proposal identifier")
    title: str = Field(default="", description="Proposal title, for display only")
    choices: list[str] = Field(description="Choice labels in declared order")
    snapshot_id: str = Field(description="Identifier of the proposal in the scoring oracle")
    snapshot_block: int | str | None = Field(
        default=None, description="Block number the voting power is measured at",
    )
    snapshot_space: str = Field(default="", description="Oracle space name")
    snapshot_network: str = Field(default="1", description="Network identifier")
    required_voting_power: float = Field(
        default=0, ge=0, description="Quorum threshold; 0 means no quorum",
    )


class ScoreBreakdown(BaseModel):
    """Voting power of one address split into own and delegated components.

    ``own_vp = total_vp - delegated_vp``. Own power may be negative when
    the oracle reports inconsistent delegation; it is never clamped.
    """

    model_config = ConfigDict(frozen=True)

    total_vp: int = Field(default=0, description="Total voting power across all strategies")
    delegated_vp: int = Field(default=0, description="Power received through delegation")
    own_vp: int = Field(default=0, description="Power held directly by the address")


# Lowercased address → breakdown
ScoreBreakdownMap = dict[str, ScoreBreakdown]

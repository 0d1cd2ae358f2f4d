"""Voting-power retrieval from the scoring oracle.

Provides the ScoringClient interface, an offline client for exported
payloads, and the batched VotingPowerAggregator.
"""

from govtally.scoring.aggregator import VotingPowerAggregator, merge_score_batches
from govtally.scoring.base import ScoringClient
from govtally.scoring.static import StaticScoringClient

__all__ = [
    "ScoringClient",
    "StaticScoringClient",
    "VotingPowerAggregator",
    "merge_score_batches",
]

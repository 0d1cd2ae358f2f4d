"""Abstract base class for scoring oracle clients.

Defines the ScoringClient interface the voting-power aggregator calls
into. The aggregator never talks to the oracle directly; network access,
timeouts and authentication all belong to the client implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from govtally.schemas.scores import (
    ScoresResponse,
    SpaceAndStrategies,
    StrategyDefinition,
)


class ScoringClient(ABC):
    """Interface to an external snapshot-based voting-power oracle."""

    @abstractmethod
    async def fetch_scores(
        self,
        addresses: Sequence[str],
        block: int | str | None,
        space: str,
        network: str,
        strategies: Sequence[StrategyDefinition] | None = None,
    ) -> ScoresResponse:
        """Fetch per-strategy scores for a set of addresses.

        Args:
            addresses: Lowercased addresses to score.
            block: Block number to measure voting power at (None = latest).
            space: Oracle space name.
            network: Network identifier.
            strategies: Strategies to score with. When None the client
                        uses the space's current strategies.

        Returns:
            A ScoresResponse whose ``scores[i]`` was produced by
            ``strategies[i]``.

        Raises:
            OracleRequestError: If the request fails for any reason.
        """

    @abstractmethod
    async def fetch_space_and_strategies(self, snapshot_id: str) -> SpaceAndStrategies:
        """Resolve the space and strategy list recorded on a proposal.

        Raises:
            OracleRequestError: If the proposal cannot be resolved.
        """

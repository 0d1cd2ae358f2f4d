"""In-memory scoring client backed by pre-fetched oracle payloads.

Serves scores from a JSON document shaped like an oracle response, so
tallies can be reproduced offline from exported data:

    {
      "space": "example.eth",
      "proposals": {"<snapshot id>": {"space": "...", "strategies": [...]}},
      "strategies": [{"name": "erc20-balance-of"}, {"name": "delegation"}],
      "scores": [{"0xabc...": 120.5}, {"0xabc...": 20}]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import ValidationError

from govtally.exceptions import OracleRequestError
from govtally.schemas.scores import (
    ScoresResponse,
    SpaceAndStrategies,
    StrategyDefinition,
)
from govtally.scoring.base import ScoringClient

logger = logging.getLogger(__name__)


class StaticScoringClient(ScoringClient):
    """ScoringClient that answers from a fixed ScoresResponse.

    ``fetch_scores`` returns only the requested addresses from each
    strategy's score map, like the live oracle does.
    """

    def __init__(
        self,
        response: ScoresResponse,
        proposals: Mapping[str, SpaceAndStrategies] | None = None,
        space: str = "",
    ) -> None:
        self._response = response
        self._proposals = dict(proposals or {})
        self._space = space
        self.requests: list[list[str]] = []

    @classmethod
    def from_dict(cls, payload: Mapping) -> StaticScoringClient:
        """Build a client from a decoded oracle payload.

        Raises:
            ValueError: If the payload does not match the expected shape.
        """
        try:
            response = ScoresResponse.model_validate(
                {
                    "scores": payload.get("scores", []),
                    "strategies": payload.get("strategies", []),
                }
            )
            proposals = {
                key: SpaceAndStrategies.model_validate(value)
                for key, value in (payload.get("proposals") or {}).items()
            }
        except ValidationError as e:
            raise ValueError(f"Invalid scores payload: {e}") from e
        return cls(response, proposals, space=payload.get("space", ""))

    @classmethod
    def from_file(cls, path: Path) -> StaticScoringClient:
        """Load a client from a JSON payload file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a valid payload.
        """
        if not path.exists():
            raise FileNotFoundError(f"Scores file not found: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Scores file {path} is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError(f"Scores file {path} must contain a JSON object")
        return cls.from_dict(payload)

    async def fetch_scores(
        self,
        addresses: Sequence[str],
        block: int | str | None,
        space: str,
        network: str,
        strategies: Sequence[StrategyDefinition] | None = None,
    ) -> ScoresResponse:
        requested = {address.lower() for address in addresses}
        self.requests.append(sorted(requested))
        logger.debug(
            "Serving %d address(es) for space=%s block=%s network=%s",
            len(requested), space or self._space, block, network,
        )

        scores = [
            {
                address: score
                for address, score in strategy_scores.items()
                if address.lower() in requested
            }
            for strategy_scores in self._response.scores
        ]
        return ScoresResponse(scores=scores, strategies=list(self._response.strategies))

    async def fetch_space_and_strategies(self, snapshot_id: str) -> SpaceAndStrategies:
        if snapshot_id in self._proposals:
            return self._proposals[snapshot_id]
        if not self._proposals:
            # Single-proposal payloads carry the strategies at the top level
            return SpaceAndStrategies(
                space=self._space, strategies=list(self._response.strategies),
            )
        raise OracleRequestError(f"Unknown snapshot proposal: {snapshot_id}")

"""Voting-power aggregation over the scoring oracle.

Fetches per-strategy scores for batches of addresses, sums them into a
total per address, and splits that total into power received through the
delegation strategy and power the address holds itself.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Iterable, Mapping, Sequence

from govtally.exceptions import MissingDelegationStrategyError, OracleRequestError
from govtally.schemas.scores import (
    ProposalRef,
    ScoreBreakdown,
    ScoreBreakdownMap,
    StrategyDefinition,
)
from govtally.schemas.settings import TallySettings
from govtally.scoring.base import ScoringClient
from govtally.votes.ballots import normalize_power

logger = logging.getLogger(__name__)


def _floor_score(value: float | int | None) -> int:
    return math.floor(normalize_power(value))


def _round_score(value: float | int | None) -> int:
    # Half rounds up, not to even
    return math.floor(normalize_power(value) + 0.5)


def _chunk(items: Sequence[str], size: int) -> list[list[str]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def _unique_lower(addresses: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(address.lower() for address in addresses))


def merge_score_batches(
    batches: Iterable[Mapping[str, ScoreBreakdown]],
) -> ScoreBreakdownMap:
    """Sum per-address breakdowns across batches.

    Every component is floored before it is added. Addresses missing from
    a batch contribute nothing for that batch. The merge is commutative
    and associative, so batch order does not matter.
    """
    totals: dict[str, list[int]] = {}
    for batch in batches:
        for address, breakdown in batch.items():
            acc = totals.setdefault(address.lower(), [0, 0, 0])
            acc[0] += math.floor(breakdown.total_vp)
            acc[1] += math.floor(breakdown.delegated_vp)
            acc[2] += math.floor(breakdown.own_vp)

    return {
        address: ScoreBreakdown(total_vp=total, delegated_vp=delegated, own_vp=own)
        for address, (total, delegated, own) in totals.items()
    }


class VotingPowerAggregator:
    """Resolves ScoreBreakdowns for addresses through an injected ScoringClient.

    Holds no state between calls: every call builds a fresh map.
    """

    def __init__(
        self,
        client: ScoringClient,
        settings: TallySettings | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or TallySettings()

    @property
    def settings(self) -> TallySettings:
        return self._settings

    async def get_scores(
        self,
        addresses: Iterable[str],
        block: int | str | None = None,
        space: str = "",
        network: str = "1",
        strategies: Sequence[StrategyDefinition] | None = None,
    ) -> ScoreBreakdownMap:
        """Fetch and aggregate voting power for one batch of addresses.

        Every requested address is present in the result, with zeros when
        the oracle returned nothing for it. Total power is the sum of the
        floored score of every strategy; delegated power is the rounded
        score of the delegation strategy.

        Args:
            addresses: Addresses to score (any case).
            block: Block number to measure at.
            space: Oracle space name.
            network: Network identifier.
            strategies: Strategies to score with.

        Returns:
            Lowercased address → ScoreBreakdown.

        Raises:
            MissingDelegationStrategyError: If the oracle's strategies do
                not include the delegation strategy.
            OracleRequestError: If the client call fails or the oracle
                returned no score map for the delegation strategy.
        """
        formatted = _unique_lower(addresses)
        response = await self._client.fetch_scores(
            formatted, block, space, network, strategies,
        )

        delegation_name = self._settings.delegation_strategy
        names = [s.name for s in response.strategies]
        if delegation_name not in names:
            raise MissingDelegationStrategyError(delegation_name, names)
        delegation_index = names.index(delegation_name)
        if delegation_index >= len(response.scores):
            raise OracleRequestError(
                f"Oracle returned {len(response.scores)} score maps for "
                f"{len(names)} strategies"
            )

        delegation_scores = {
            address.lower(): score
            for address, score in response.scores[delegation_index].items()
        }
        delegated = {
            address: _round_score(delegation_scores.get(address))
            for address in formatted
        }
        totals = dict.fromkeys(formatted, 0)

        for strategy_scores in response.scores:
            for raw_address, score in strategy_scores.items():
                address = raw_address.lower()
                if address not in totals:
                    logger.debug("Ignoring score for unrequested address %s", address)
                    continue
                totals[address] += _floor_score(score)

        return {
            address: ScoreBreakdown(
                total_vp=totals[address],
                delegated_vp=delegated[address],
                own_vp=totals[address] - delegated[address],
            )
            for address in formatted
        }

    async def get_proposal_scores(
        self,
        proposal: ProposalRef,
        addresses: Iterable[str],
    ) -> ScoreBreakdownMap:
        """Aggregate voting power for every address at a proposal's snapshot.

        Resolves the proposal's strategies once, then scores the addresses
        in batches of ``settings.batch_size`` with at most
        ``settings.max_concurrency`` batches in flight. If any batch fails
        the remaining batches are cancelled and the error propagates; no
        partial result is returned.

        Args:
            proposal: The proposal whose snapshot to measure at.
            addresses: Addresses to score (any case, duplicates allowed).

        Returns:
            Lowercased address → ScoreBreakdown, one entry per address.

        Raises:
            MissingDelegationStrategyError: See get_scores().
            OracleRequestError: If any oracle call fails.
        """
        space_and_strategies = await self._client.fetch_space_and_strategies(
            proposal.snapshot_id,
        )
        space = proposal.snapshot_space or space_and_strategies.space

        batches = _chunk(_unique_lower(addresses), self._settings.batch_size)
        if not batches:
            return {}

        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def _score_batch(number: int, batch: list[str]) -> ScoreBreakdownMap:
            async with semaphore:
                logger.info(
                    "Scoring batch %d/%d (%d addresses) for proposal %s",
                    number, len(batches), len(batch), proposal.snapshot_id,
                )
                try:
                    return await self.get_scores(
                        batch,
                        proposal.snapshot_block,
                        space,
                        proposal.snapshot_network,
                        space_and_strategies.strategies,
                    )
                except Exception as e:
                    logger.error(
                        "Batch %d/%d failed for proposal %s: %s",
                        number, len(batches), proposal.snapshot_id, e,
                    )
                    raise

        tasks = [
            asyncio.ensure_future(_score_batch(number, batch))
            for number, batch in enumerate(batches, start=1)
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Drain cancelled siblings so their outcome is retrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return merge_score_batches(results)

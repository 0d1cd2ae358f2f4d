"""Result tallying and winner resolution.

Aggregates per-choice vote counts and voting power for a proposal and
normalizes them into display percentages. Whenever the proposal reached
its required voting power, the rounding remainder goes to the leading
choice(s) so that percentages sum to exactly 100.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from govtally.exceptions import InvalidChoiceIndexError
from govtally.schemas.votes import Ballot, ChoiceResult
from govtally.votes.ballots import normalize_power
from govtally.votes.colors import classify_choice

logger = logging.getLogger(__name__)

FULL_PROGRESS = 100


def calculate_result(
    choices: Sequence[str],
    votes: Mapping[str, Ballot] | None,
    required_voting_power: float = 0,
) -> list[ChoiceResult]:
    """Tally ballots into one ChoiceResult per choice, in declared order.

    Progress is measured against ``max(total_power, required_voting_power)``
    so a proposal below quorum shows progress towards the quorum target.
    A choice holding all of that power shows exactly 100; any other choice
    with power shows at least 1. When the proposal reached its required
    power, the remaining percentage is split evenly among the choices with
    the highest progress. Below quorum the remainder is left unassigned.

    Args:
        choices: Choice labels in declared order.
        votes: Voter address → Ballot.
        required_voting_power: Quorum threshold (0 = none).

    Returns:
        One ChoiceResult per choice, in the same order as ``choices``.

    Raises:
        InvalidChoiceIndexError: If a ballot's 1-based choice index is
            outside ``choices``.
    """
    powers: list[float] = [0] * len(choices)
    counts: list[int] = [0] * len(choices)
    total_power: float = 0

    for voter, ballot in (votes or {}).items():
        index = ballot.choice - 1
        if not 0 <= index < len(choices):
            raise InvalidChoiceIndexError(voter, ballot.choice, len(choices))
        vp = normalize_power(ballot.vp)
        total_power += vp
        powers[index] += vp
        counts[index] += 1

    required = normalize_power(required_voting_power)
    total_power_progress = max(total_power, required)

    rest: float = FULL_PROGRESS
    max_progress = 0
    results: list[ChoiceResult] = []
    for i, choice in enumerate(choices):
        color = classify_choice(choice, i)
        power = powers[i]

        if total_power == 0 or power == 0:
            results.append(
                ChoiceResult(choice=choice, color=color, votes=counts[i], power=0, progress=0)
            )
            continue

        if power == total_power_progress:
            results.append(
                ChoiceResult(
                    choice=choice, color=color, votes=counts[i],
                    power=power, progress=FULL_PROGRESS,
                )
            )
            continue

        progress = max(math.floor(power / total_power_progress * 100), 1)
        rest -= progress
        max_progress = max(max_progress, progress)
        results.append(
            ChoiceResult(
                choice=choice, color=color, votes=counts[i],
                power=power, progress=progress,
            )
        )

    if rest not in (0, FULL_PROGRESS) and total_power >= required:
        leaders = [r for r in results if r.progress == max_progress]
        share = rest / len(leaders)
        for leader in leaders:
            leader.progress += share
        logger.debug(
            "Distributed %s%% remainder across %d leading choice(s)",
            rest, len(leaders),
        )

    return results


def calculate_result_winner(
    choices: Sequence[str],
    votes: Mapping[str, Ballot] | None,
    required_voting_power: float = 0,
) -> ChoiceResult:
    """Return the ChoiceResult with the most power.

    Ties go to the choice declared first.

    Raises:
        ValueError: If the proposal has no choices.
        InvalidChoiceIndexError: If a ballot's choice index is out of range.
    """
    return resolve_winner(calculate_result(choices, votes, required_voting_power))


def resolve_winner(results: Sequence[ChoiceResult]) -> ChoiceResult:
    """Reduce already-tallied results to the one with the most power.

    Ties go to the earliest result.

    Raises:
        ValueError: If ``results`` is empty.
    """
    if not results:
        raise ValueError("Cannot resolve a winner for a proposal with no choices")

    winner = results[0]
    for current in results[1:]:
        if current.power > winner.power:
            winner = current
    return winner

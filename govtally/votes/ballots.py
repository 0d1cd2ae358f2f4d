"""Ballot construction from raw vote-source records.

Merges raw ballots with resolved voting power into one Ballot per voter,
plus small helpers used by the views that list votes and proposals.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Iterable, Mapping

from govtally.schemas.scores import ScoreBreakdown
from govtally.schemas.votes import Ballot, RawBallot

logger = logging.getLogger(__name__)


def normalize_power(value: float | int | None) -> float:
    """Coerce a voting-power value to a finite, non-negative number.

    None, NaN, infinities and negative values become 0.
    """
    if value is None:
        return 0
    number = float(value)
    if not math.isfinite(number) or number < 0:
        return 0
    return value if isinstance(value, int) else number


def create_votes(
    raw_ballots: Iterable[RawBallot | Mapping],
    balances: Mapping[str, ScoreBreakdown],
) -> dict[str, Ballot]:
    """Build the voter → Ballot map for a proposal.

    Voting power is the voter's ``total_vp`` in ``balances`` (0 when the
    address is absent). Addresses are compared lowercased on both sides.
    When one voter appears more than once, the later ballot wins.

    Args:
        raw_ballots: Ballots from the vote source, as RawBallot or dicts
            with ``voter``, ``choice`` and ``created`` keys.
        balances: Address → ScoreBreakdown, as returned by the aggregator.

    Returns:
        Mapping of lowercased voter address → Ballot.
    """
    balance = {
        address.lower(): breakdown.total_vp
        for address, breakdown in balances.items()
    }

    votes: dict[str, Ballot] = {}
    for raw in raw_ballots:
        ballot = raw if isinstance(raw, RawBallot) else RawBallot.model_validate(raw)
        address = ballot.voter.lower()
        if address in votes:
            logger.debug("Voter %s voted more than once; keeping latest ballot", address)
        votes[address] = Ballot(
            voter=address,
            choice=ballot.choice,
            vp=normalize_power(balance.get(address, 0)),
            timestamp=ballot.created,
        )
    return votes


def sort_votes_by_power(votes: Mapping[str, Ballot]) -> list[tuple[str, Ballot]]:
    """Return (address, Ballot) pairs ordered by voting power, largest first."""
    return sorted(votes.items(), key=lambda item: item[1].vp, reverse=True)


def to_proposal_ids(ids: str | Iterable[str] | None) -> list[str]:
    """Normalize a query value into a list of valid proposal UUIDs.

    Accepts None, a single id, or a list of ids. Anything that is not a
    UUID string is dropped.
    """
    if not ids:
        return []

    values = [ids] if isinstance(ids, str) else list(ids)
    return [str(value) for value in values if _is_uuid(str(value))]


def _is_uuid(value: str) -> bool:
    # uuid.UUID also accepts braces, urn prefixes and bare hex; require canonical form
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    return str(parsed) == value.lower()


def drop_invalid_ballots(
    votes: Mapping[str, Ballot], num_choices: int,
) -> dict[str, Ballot]:
    """Return a copy of ``votes`` without ballots outside ``1..num_choices``.

    Each dropped ballot is logged at WARNING level.
    """
    kept: dict[str, Ballot] = {}
    for address, ballot in votes.items():
        if 1 <= ballot.choice <= num_choices:
            kept[address] = ballot
        else:
            logger.warning(
                "Dropping ballot from %s: choice %d outside 1..%d",
                address, ballot.choice, num_choices,
            )
    return kept

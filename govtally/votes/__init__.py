"""Vote tallying for governance proposals.

Provides ballot construction, choice color classification, result
tallying with remainder normalization, and winner resolution.
"""

from govtally.votes.ballots import (
    create_votes,
    drop_invalid_ballots,
    normalize_power,
    sort_votes_by_power,
    to_proposal_ids,
)
from govtally.votes.colors import classify_choice
from govtally.votes.tally import (
    calculate_result,
    calculate_result_winner,
    resolve_winner,
)

__all__ = [
    "calculate_result",
    "calculate_result_winner",
    "classify_choice",
    "create_votes",
    "drop_invalid_ballots",
    "normalize_power",
    "resolve_winner",
    "sort_votes_by_power",
    "to_proposal_ids",
]

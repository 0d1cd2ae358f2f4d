"""govtally — vote tallying and voting-power aggregation for governance proposals."""

__version__ = "0.1.0"

from govtally.exceptions import (
    GovTallyError,
    InvalidChoiceIndexError,
    MissingDelegationStrategyError,
    OracleRequestError,
)
from govtally.formatting import abbreviate_number
from govtally.scoring import (
    ScoringClient,
    StaticScoringClient,
    VotingPowerAggregator,
    merge_score_batches,
)
from govtally.votes import (
    calculate_result,
    calculate_result_winner,
    classify_choice,
    create_votes,
    to_proposal_ids,
)

__all__ = [
    "GovTallyError",
    "InvalidChoiceIndexError",
    "MissingDelegationStrategyError",
    "OracleRequestError",
    "ScoringClient",
    "StaticScoringClient",
    "VotingPowerAggregator",
    "abbreviate_number",
    "calculate_result",
    "calculate_result_winner",
    "classify_choice",
    "create_votes",
    "merge_score_batches",
    "to_proposal_ids",
]

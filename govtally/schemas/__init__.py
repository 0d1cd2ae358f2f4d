"""govtally schema definitions.

All Pydantic v2 models used by the tally engine and the voting-power
aggregator.
"""

from govtally.schemas.scores import (
    ProposalRef,
    ScoreBreakdown,
    ScoreBreakdownMap,
    ScoresResponse,
    SpaceAndStrategies,
    StrategyDefinition,
)
from govtally.schemas.settings import TallySettings
from govtally.schemas.votes import (
    Ballot,
    ChoiceColor,
    ChoiceResult,
    ColorCategory,
    RawBallot,
)

__all__ = [
    "Ballot",
    "ChoiceColor",
    "ChoiceResult",
    "ColorCategory",
    "ProposalRef",
    "RawBallot",
    "ScoreBreakdown",
    "ScoreBreakdownMap",
    "ScoresResponse",
    "SpaceAndStrategies",
    "StrategyDefinition",
    "TallySettings",
]

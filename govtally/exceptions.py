class GovTallyError(Exception):
    """Base exception for all govtally errors."""
    pass


class MissingDelegationStrategyError(GovTallyError):
    """Raised when the oracle's strategy list has no delegation strategy."""

    def __init__(self, strategy_name: str, available: list[str]) -> None:
        self.strategy_name = strategy_name
        self.available = available
        super().__init__(
            f"Delegation strategy '{strategy_name}' missing from oracle "
            f"strategies: {available}"
        )


class OracleRequestError(GovTallyError):
    """Raised by scoring clients when a request to the oracle fails."""
    pass


class InvalidChoiceIndexError(GovTallyError):
    """Raised when a ballot's choice index is outside the proposal's choices."""

    def __init__(self, voter: str, choice: int, num_choices: int) -> None:
        self.voter = voter
        self.choice = choice
        self.num_choices = num_choices
        super().__init__(
            f"Ballot from {voter} has choice {choice}, "
            f"expected 1..{num_choices}"
        )

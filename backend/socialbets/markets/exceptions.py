"""Bet market exceptions."""


class SocialBetsError(Exception):
    """Base exception for bet lifecycle errors."""

    pass


class ConflictError(SocialBetsError):
    """Bet id already exists in the registry."""

    def __init__(self, bet_id: str):
        super().__init__(f"Bet already exists: {bet_id}")
        self.bet_id = bet_id


class NotFoundError(SocialBetsError):
    """Bet id is not in the expected state."""

    def __init__(self, bet_id: str, state: str):
        super().__init__(f"No {state} bet with id: {bet_id}")
        self.bet_id = bet_id
        self.state = state


class OracleUnavailable(SocialBetsError):
    """Upstream classifier call failed or timed out."""

    pass


class MalformedIntent(SocialBetsError):
    """Classifier response did not decode into a known intent."""

    pass


class IdentityResolutionError(SocialBetsError):
    """Sender could not be mapped to a participant address."""

    def __init__(self, sender_id: str):
        super().__init__(f"Unable to resolve participant address for {sender_id}")
        self.sender_id = sender_id

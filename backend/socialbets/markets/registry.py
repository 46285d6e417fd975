"""Bet registry: single source of truth for pending and confirmed bets."""

import logging

from socialbets.markets.exceptions import ConflictError, NotFoundError
from socialbets.markets.models import Bet

logger = logging.getLogger(__name__)


class BetRegistry:
    """Two keyed mappings tracking each bet's lifecycle.

    A bet moves Pending -> Confirmed -> removed. Every transition replaces
    container membership in a single step; bet values are never mutated.
    Accessors return copies so callers cannot mutate registry state.
    """

    def __init__(self) -> None:
        self._pending: dict[str, Bet] = {}
        self._confirmed: dict[str, Bet] = {}

    def create_pending(self, bet_id: str, bet: Bet) -> None:
        """Register a new bet awaiting confirmation.

        Raises:
            ConflictError: If the id is already pending or confirmed.
        """
        if bet_id in self._pending or bet_id in self._confirmed:
            raise ConflictError(bet_id)
        self._pending[bet_id] = bet
        logger.info(
            "Bet %s pending: %s vs %s for %s",
            bet_id,
            bet.maker,
            bet.taker,
            bet.amount,
        )

    def confirm(self, bet_id: str) -> Bet:
        """Move a pending bet into confirmed.

        Raises:
            NotFoundError: If the id is not pending.
        """
        bet = self._pending.pop(bet_id, None)
        if bet is None:
            raise NotFoundError(bet_id, "pending")
        self._confirmed[bet_id] = bet
        logger.info("Bet %s confirmed", bet_id)
        return bet

    def resolve(self, bet_id: str) -> Bet:
        """Remove a confirmed bet once a winner has been determined.

        Raises:
            NotFoundError: If the id is not confirmed.
        """
        bet = self._confirmed.pop(bet_id, None)
        if bet is None:
            raise NotFoundError(bet_id, "confirmed")
        logger.info("Bet %s resolved", bet_id)
        return bet

    def get_pending(self, bet_id: str) -> Bet | None:
        return self._pending.get(bet_id)

    def get_confirmed(self, bet_id: str) -> Bet | None:
        return self._confirmed.get(bet_id)

    def pending_snapshot(self) -> dict[str, Bet]:
        return dict(self._pending)

    def confirmed_snapshot(self) -> dict[str, Bet]:
        return dict(self._confirmed)

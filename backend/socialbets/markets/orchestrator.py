"""Bet Orchestrator: drives the bet lifecycle from the chat message stream."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from socialbets.agents.classifier.models import (
    ConfirmBet,
    CreateBet,
    NoAction,
    ResolveBet,
)
from socialbets.markets import messages
from socialbets.markets.context import ConversationContext
from socialbets.markets.dedup import EventDeduplicator
from socialbets.markets.exceptions import (
    ConflictError,
    IdentityResolutionError,
    MalformedIntent,
    NotFoundError,
    OracleUnavailable,
)
from socialbets.markets.models import Bet, ChatEvent, ChatMessage, PaymentRequest
from socialbets.markets.registry import BetRegistry
from socialbets.payments.usdc import USDCHandler, WalletSendCalls, to_minimum_units

logger = logging.getLogger(__name__)

Intent = NoAction | CreateBet | ConfirmBet | ResolveBet


class ChatTransport(Protocol):
    """Messaging client the orchestrator reads from and writes to."""

    agent_id: str

    def stream_events(self) -> AsyncIterator[ChatEvent]: ...

    async def send_text(self, conversation_id: str, text: str) -> str: ...

    async def send_payment_request(
        self, conversation_id: str, calls: WalletSendCalls
    ) -> str: ...

    async def resolve_participant(
        self, sender_id: str, sender_name: str | None = None
    ) -> str | None: ...


class Classifier(Protocol):
    async def classify(
        self,
        context: Sequence[ChatMessage],
        pending: Mapping[str, Bet],
        confirmed: Mapping[str, Bet],
    ) -> Intent: ...


@dataclass
class ConversationSession:
    """Bet state and context of a single conversation."""

    conversation_id: str
    context: ConversationContext
    registry: BetRegistry = field(default_factory=BetRegistry)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    welcomed: bool = False


def generate_bet_id() -> str:
    return f"bet_{uuid4().hex[:8]}"


class BetOrchestrator:
    """Consumes chat events and applies classifier verdicts to bet state.

    Dedup, filtering, identity resolution and context updates run inline in
    stream order. The classifier call and the resulting registry mutation run
    as a task per event, serialized per conversation by the session lock so
    each verdict is applied to the same registry state it was computed from.
    """

    def __init__(
        self,
        transport: ChatTransport,
        classifier: Classifier,
        payments: USDCHandler,
        deduplicator: EventDeduplicator | None = None,
        max_context_messages: int = 0,
        welcome_enabled: bool = True,
        notify_on_oracle_failure: bool = True,
        bet_id_factory: Callable[[], str] = generate_bet_id,
    ):
        self.transport = transport
        self.classifier = classifier
        self.payments = payments
        self.deduplicator = deduplicator or EventDeduplicator()
        self.max_context_messages = max_context_messages
        self.welcome_enabled = welcome_enabled
        self.notify_on_oracle_failure = notify_on_oracle_failure
        self._bet_id_factory = bet_id_factory

        self._sessions: dict[str, ConversationSession] = {}
        self._participants: dict[str, str] = {}
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Stream loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Process the transport's event stream until it ends."""
        logger.info("Waiting for messages...")
        try:
            async for event in self.transport.stream_events():
                try:
                    await self.handle_event(event)
                except Exception as e:
                    logger.error(f"Failed to handle event {event.id}: {e}", exc_info=True)
        finally:
            await self.drain()

    async def drain(self) -> None:
        """Wait for all in-flight classifier tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def session(self, conversation_id: str) -> ConversationSession:
        session = self._sessions.get(conversation_id)
        if session is None:
            session = ConversationSession(
                conversation_id=conversation_id,
                context=ConversationContext(self.max_context_messages),
            )
            self._sessions[conversation_id] = session
        return session

    async def handle_event(self, event: ChatEvent) -> asyncio.Task | None:
        """Run the inline per-event steps and dispatch classification.

        Returns the dispatched task, or None when the event was dropped.
        """
        if self.deduplicator.has_seen(event.id):
            logger.debug(f"Dropping already seen event {event.id}")
            return None

        if event.sender_id.casefold() == self.transport.agent_id.casefold():
            return None

        if event.content_type != "text" or not event.content:
            logger.info(f"Ignoring non-text event {event.id} from {event.sender_id}")
            self.deduplicator.mark_seen(event.id)
            return None

        logger.info(f"Received message: {event.content} by {event.sender_id}")

        try:
            participant = await self._resolve_participant(event)
        except IdentityResolutionError as e:
            logger.warning(f"{e}, skipping")
            return None

        session = self.session(event.conversation_id)
        if self.welcome_enabled and not session.welcomed:
            session.welcomed = True
            await self._send_text(event.conversation_id, messages.WELCOME_MESSAGE)

        self.deduplicator.mark_seen(event.id)
        session.context.append(participant, event.content, event.sender_name)

        task = asyncio.create_task(
            self._classify_and_apply(session),
            name=f"classify-{event.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _resolve_participant(self, event: ChatEvent) -> str:
        cached = self._participants.get(event.sender_id)
        if cached:
            return cached

        address = await self.transport.resolve_participant(
            event.sender_id, event.sender_name
        )
        if not address:
            raise IdentityResolutionError(event.sender_id)

        logger.info(f"Member address {address} for {event.sender_id}")
        self._participants[event.sender_id] = address
        return address

    # ------------------------------------------------------------------
    # Classification and state transitions
    # ------------------------------------------------------------------

    async def _classify_and_apply(self, session: ConversationSession) -> None:
        async with session.lock:
            try:
                intent = await self.classifier.classify(
                    session.context.snapshot(),
                    session.registry.pending_snapshot(),
                    session.registry.confirmed_snapshot(),
                )
            except OracleUnavailable as e:
                logger.error(f"Classifier unavailable: {e}")
                if self.notify_on_oracle_failure:
                    await self._send_text(
                        session.conversation_id, messages.ORACLE_UNAVAILABLE_MESSAGE
                    )
                return
            except MalformedIntent as e:
                logger.warning(f"Discarding malformed classifier output: {e}")
                return

            try:
                await self.apply_intent(session, intent)
            except Exception as e:
                logger.error(
                    f"Failed to apply {intent.action} in {session.conversation_id}: {e}",
                    exc_info=True,
                )
                await self._send_text(
                    session.conversation_id, messages.PROCESSING_ERROR_MESSAGE
                )

    async def apply_intent(self, session: ConversationSession, intent: Intent) -> None:
        """Apply one classifier verdict to the session's registry."""
        if isinstance(intent, CreateBet):
            await self._create_bet(session, intent)
        elif isinstance(intent, ConfirmBet):
            await self._confirm_bet(session, intent)
        elif isinstance(intent, ResolveBet):
            await self._resolve_bet(session, intent)
        else:
            logger.debug(f"No market action in {session.conversation_id}")

    async def _create_bet(self, session: ConversationSession, intent: CreateBet) -> None:
        bet = intent.to_bet()
        bet_id = self._bet_id_factory()
        try:
            session.registry.create_pending(bet_id, bet)
        except ConflictError as e:
            logger.error(f"Not creating bet: {e}")
            return
        await self._send_text(
            session.conversation_id, messages.format_proposal(bet_id, bet)
        )

    async def _confirm_bet(self, session: ConversationSession, intent: ConfirmBet) -> None:
        try:
            bet = session.registry.confirm(intent.bet_id)
        except NotFoundError as e:
            logger.warning(str(e))
            await self._send_text(
                session.conversation_id, messages.format_missing_pending(intent.bet_id)
            )
            return
        await self._send_text(
            session.conversation_id, messages.format_confirmation(intent.bet_id, bet)
        )

    async def _resolve_bet(self, session: ConversationSession, intent: ResolveBet) -> None:
        conversation_id = session.conversation_id
        bet = session.registry.get_confirmed(intent.bet_id)
        if bet is None:
            await self._send_text(
                conversation_id, messages.format_missing_confirmed(intent.bet_id)
            )
            return

        winner = match_winner(bet, intent.winner)
        logger.info(f"Classifier determines winner of {intent.bet_id} as: {intent.winner}")
        if winner is None:
            await self._send_text(
                conversation_id,
                messages.format_unresolved(intent.bet_id, intent.resolution_details),
            )
            return

        # Build the payment first so a bad address leaves the bet confirmed
        request = build_payment_request(intent.bet_id, bet, winner)
        try:
            calls = self.payments.create_payment_calls(request)
        except ValueError as e:
            logger.error(f"Unable to build payment request for {intent.bet_id}: {e}")
            await self._send_text(
                conversation_id, messages.format_payment_unavailable(intent.bet_id, winner)
            )
            return

        try:
            session.registry.resolve(intent.bet_id)
        except NotFoundError:
            await self._send_text(
                conversation_id, messages.format_missing_confirmed(intent.bet_id)
            )
            return

        await self._send_text(
            conversation_id,
            messages.format_winner(intent.bet_id, winner, intent.resolution_details),
        )
        await self._send_payment(conversation_id, calls)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def _send_text(self, conversation_id: str, text: str) -> str | None:
        try:
            message_id = await self.transport.send_text(conversation_id, text)
        except Exception as e:
            logger.error(f"Failed to send message to {conversation_id}: {e}")
            return None
        self.deduplicator.mark_seen(message_id)
        return message_id

    async def _send_payment(
        self, conversation_id: str, calls: WalletSendCalls
    ) -> str | None:
        try:
            message_id = await self.transport.send_payment_request(conversation_id, calls)
        except Exception as e:
            logger.error(f"Failed to send payment request to {conversation_id}: {e}")
            return None
        logger.info("Replied with wallet send calls")
        self.deduplicator.mark_seen(message_id)
        return message_id


def match_winner(bet: Bet, winner: str | None) -> str | None:
    """Return the stored maker or taker identifier the winner refers to.

    Identifiers are wallet addresses, so the comparison ignores case. Any
    other value means the bet has not resolved.
    """
    if not winner:
        return None
    candidate = winner.strip().casefold()
    for side in (bet.maker, bet.taker):
        if side.casefold() == candidate:
            return side
    return None


def build_payment_request(bet_id: str, bet: Bet, winner: str) -> PaymentRequest:
    """Payment owed by the losing side to ``winner``."""
    loser = bet.taker if winner == bet.maker else bet.maker
    return PaymentRequest(
        bet_id=bet_id,
        amount_units=to_minimum_units(bet.amount),
        payer=loser,
        payee=winner,
    )

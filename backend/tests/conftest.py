"""
Shared test fixtures.

Orchestrator tests run against an in-memory transport and a scripted
classifier, so no Telegram or LLM access is needed.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import pytest

from socialbets.agents.classifier.models import NoAction
from socialbets.markets.models import Bet, ChatEvent, ChatMessage
from socialbets.payments.usdc import USDCHandler, WalletSendCalls

MAKER = "0x" + "a1" * 20
TAKER = "0x" + "b2" * 20
OUTSIDER = "0x" + "c3" * 20

AGENT_ID = "999"
CHAT_ID = "-100123"


def make_event(
    message_id: int | str,
    sender_id: str = "1",
    content: str | None = "hello",
    conversation_id: str = CHAT_ID,
    content_type: str = "text",
    sender_name: str | None = None,
) -> ChatEvent:
    return ChatEvent(
        id=f"{conversation_id}:{message_id}",
        sender_id=sender_id,
        conversation_id=conversation_id,
        content=content,
        content_type=content_type,
        sender_name=sender_name,
    )


class FakeTransport:
    """In-memory chat transport recording everything the agent sends."""

    def __init__(
        self,
        participants: Mapping[str, str] | None = None,
        events: Sequence[ChatEvent] = (),
        fail_sends: bool = False,
    ):
        self.agent_id = AGENT_ID
        self.participants = dict(participants or {"1": MAKER, "2": TAKER})
        self.events = list(events)
        self.fail_sends = fail_sends
        self.texts: list[tuple[str, str]] = []
        self.payments: list[tuple[str, WalletSendCalls]] = []
        self.resolve_calls: list[str] = []
        self._next_id = 0

    def _message_id(self, conversation_id: str) -> str:
        self._next_id += 1
        return f"{conversation_id}:agent-{self._next_id}"

    async def stream_events(self):
        for event in self.events:
            yield event

    async def send_text(self, conversation_id: str, text: str) -> str:
        if self.fail_sends:
            raise ConnectionError("send failed")
        self.texts.append((conversation_id, text))
        return self._message_id(conversation_id)

    async def send_payment_request(
        self, conversation_id: str, calls: WalletSendCalls
    ) -> str:
        if self.fail_sends:
            raise ConnectionError("send failed")
        self.payments.append((conversation_id, calls))
        return self._message_id(conversation_id)

    async def resolve_participant(
        self, sender_id: str, sender_name: str | None = None
    ) -> str | None:
        self.resolve_calls.append(sender_id)
        return self.participants.get(sender_id)

    @property
    def sent_texts(self) -> list[str]:
        return [text for _, text in self.texts]


@dataclass
class ClassifierCall:
    context: tuple[ChatMessage, ...]
    pending: dict[str, Bet]
    confirmed: dict[str, Bet]


@dataclass
class ScriptedClassifier:
    """Returns queued verdicts in order; raises queued exceptions."""

    verdicts: list = field(default_factory=list)
    calls: list[ClassifierCall] = field(default_factory=list)

    async def classify(self, context, pending, confirmed):
        self.calls.append(ClassifierCall(tuple(context), dict(pending), dict(confirmed)))
        if not self.verdicts:
            return NoAction()
        verdict = self.verdicts.pop(0)
        if isinstance(verdict, Exception):
            raise verdict
        return verdict


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def payments() -> USDCHandler:
    return USDCHandler("base-sepolia")


@pytest.fixture
def sample_bet() -> Bet:
    return Bet(
        amount="5",
        condition="Lakers beat the Celtics on Friday",
        maker=MAKER,
        taker=TAKER,
    )

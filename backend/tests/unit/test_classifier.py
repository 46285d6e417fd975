"""
Unit Tests: Intent Classifier

Test cases:
- Strict tagged decode of classifier payloads
- CreateBet validation downgrades to NoAction
- Upstream failures map to OracleUnavailable
- Rejected output maps to MalformedIntent
- Prompt carries conversation and registry snapshots
"""

import asyncio
import json
from types import SimpleNamespace

import pytest
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior

from conftest import MAKER, TAKER
from socialbets.agents.classifier import (
    ClassifierVerdict,
    ConfirmBet,
    CreateBet,
    IntentClassifier,
    NoAction,
    ResolveBet,
    decode_intent,
    validate_intent,
)
from socialbets.agents.classifier.prompts import build_classifier_prompt
from socialbets.markets import Bet, ChatMessage, MalformedIntent, OracleUnavailable


class FakeAgent:
    """Stands in for a pydantic_ai Agent."""

    def __init__(self, output=None, error: Exception | None = None, delay: float = 0.0):
        self.output = output
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    async def run(self, prompt: str):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output=self.output)


def _classify(classifier: IntentClassifier, context=(), pending=None, confirmed=None):
    return asyncio.run(classifier.classify(list(context), pending or {}, confirmed or {}))


def test_decode_create_bet_from_dict() -> None:
    intent = decode_intent(
        {
            "action": "create_bet",
            "amount": 5,
            "condition": "Lakers win on Friday",
            "maker": MAKER,
            "taker": TAKER,
        }
    )
    assert isinstance(intent, CreateBet)
    assert intent.amount == 5


def test_decode_resolve_bet_from_json_string() -> None:
    payload = json.dumps(
        {
            "intent": {
                "action": "resolve_bet",
                "bet_id": "bet_1",
                "resolution_details": "Game is on Friday",
            }
        }
    )
    intent = decode_intent(payload)
    assert isinstance(intent, ResolveBet)
    assert intent.winner is None


def test_decode_verdict_and_null() -> None:
    verdict = ClassifierVerdict(intent=ConfirmBet(bet_id="bet_1"))
    assert decode_intent(verdict) == ConfirmBet(bet_id="bet_1")
    assert isinstance(decode_intent(None), NoAction)
    assert isinstance(decode_intent("null"), NoAction)


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "cancel_bet", "bet_id": "bet_1"},
        {"action": "confirm_bet"},
        {"action": "confirm_bet", "bet_id": "bet_1", "extra": True},
        {"bet_id": "bet_1"},
        "not json",
        ["create_bet"],
    ],
)
def test_decode_rejects_unknown_payloads(payload) -> None:
    with pytest.raises(MalformedIntent):
        decode_intent(payload)


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": -3},
        {"condition": "   "},
        {"maker": ""},
        {"taker": MAKER},
    ],
)
def test_invalid_create_bet_becomes_no_action(overrides: dict) -> None:
    fields = {"amount": 5, "condition": "Lakers win", "maker": MAKER, "taker": TAKER}
    fields.update(overrides)
    assert isinstance(validate_intent(CreateBet(**fields)), NoAction)


def test_valid_create_bet_passes_validation() -> None:
    intent = CreateBet(amount=5, condition="Lakers win", maker=MAKER, taker=TAKER)
    assert validate_intent(intent) is intent


def test_classify_returns_validated_intent() -> None:
    output = ClassifierVerdict(
        intent=CreateBet(amount=5, condition="Lakers win", maker=MAKER, taker=TAKER)
    )
    classifier = IntentClassifier(agent=FakeAgent(output=output))

    intent = _classify(classifier)

    assert isinstance(intent, CreateBet)
    assert intent.to_bet().maker == MAKER


def test_classify_downgrades_self_bet() -> None:
    output = ClassifierVerdict(
        intent=CreateBet(amount=5, condition="Lakers win", maker=MAKER, taker=MAKER)
    )
    classifier = IntentClassifier(agent=FakeAgent(output=output))
    assert isinstance(_classify(classifier), NoAction)


def test_classify_downgrades_self_bet_with_different_address_case() -> None:
    same_wallet = "0x" + MAKER[2:].upper()
    output = ClassifierVerdict(
        intent=CreateBet(amount=5, condition="Lakers win", maker=MAKER, taker=same_wallet)
    )
    classifier = IntentClassifier(agent=FakeAgent(output=output))
    assert isinstance(_classify(classifier), NoAction)


def test_classify_timeout_is_oracle_unavailable() -> None:
    agent = FakeAgent(output=ClassifierVerdict(intent=NoAction()), delay=1.0)
    classifier = IntentClassifier(agent=agent, timeout_seconds=0.01)

    with pytest.raises(OracleUnavailable, match="timed out"):
        _classify(classifier)


def test_classify_http_error_is_oracle_unavailable() -> None:
    error = ModelHTTPError(status_code=503, model_name="gpt-4.1", body=None)
    classifier = IntentClassifier(agent=FakeAgent(error=error))

    with pytest.raises(OracleUnavailable, match="503"):
        _classify(classifier)


def test_classify_connection_error_is_oracle_unavailable() -> None:
    classifier = IntentClassifier(agent=FakeAgent(error=ConnectionError("reset")))
    with pytest.raises(OracleUnavailable):
        _classify(classifier)


def test_classify_rejected_output_is_malformed() -> None:
    error = UnexpectedModelBehavior("Exceeded maximum retries for output validation")
    classifier = IntentClassifier(agent=FakeAgent(error=error))

    with pytest.raises(MalformedIntent):
        _classify(classifier)


def test_classify_unparsable_output_is_malformed() -> None:
    classifier = IntentClassifier(agent=FakeAgent(output={"action": "dance"}))
    with pytest.raises(MalformedIntent):
        _classify(classifier)


def test_prompt_includes_conversation_and_bets(sample_bet: Bet) -> None:
    context = [
        ChatMessage(sender=MAKER, text="I bet you $5 the Lakers win", display_name="alice"),
        ChatMessage(sender=TAKER, text="Deal"),
    ]
    prompt = build_classifier_prompt(context, {"bet_1": sample_bet}, {})

    history = json.loads(prompt.split("\n")[1])
    assert history[0] == {
        "userId": MAKER,
        "name": "alice",
        "content": "I bet you $5 the Lakers win",
    }
    assert history[1] == {"userId": TAKER, "content": "Deal"}
    assert '"betId": "bet_1"' in prompt
    assert sample_bet.condition in prompt
    assert prompt.rstrip().endswith("[]")


def test_classifier_passes_snapshots_to_agent(sample_bet: Bet) -> None:
    agent = FakeAgent(output=ClassifierVerdict(intent=NoAction()))
    classifier = IntentClassifier(agent=agent)

    _classify(
        classifier,
        context=[ChatMessage(sender=MAKER, text="resolve bet_9 please")],
        confirmed={"bet_9": sample_bet},
    )

    assert len(agent.prompts) == 1
    assert "resolve bet_9 please" in agent.prompts[0]
    assert "bet_9" in agent.prompts[0].split("--- CONFIRMED BETS ---")[1]

"""Intent variants returned by the classifier agent."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from socialbets.markets.exceptions import MalformedIntent
from socialbets.markets.models import Bet


class NoAction(BaseModel):
    """Nothing in the conversation calls for a market action."""

    model_config = ConfigDict(extra="forbid")

    action: Literal["no_action"] = "no_action"


class CreateBet(BaseModel):
    """Propose a new bet agreed between a maker and a taker."""

    model_config = ConfigDict(extra="forbid")

    action: Literal["create_bet"] = "create_bet"
    amount: float = Field(description="The amount being bet, in USDC")
    condition: str = Field(
        description=(
            "Concise but complete description of the condition being bet upon. "
            "It is used later to resolve the bet, so keep the detail needed to verify it."
        )
    )
    maker: str = Field(
        description="User ID of the participant who proposed the bet and the amount"
    )
    taker: str = Field(
        description="User ID of the participant who accepted the terms of the bet"
    )

    def to_bet(self) -> Bet:
        return Bet(
            amount=Decimal(str(self.amount)),
            condition=self.condition.strip(),
            maker=self.maker.strip(),
            taker=self.taker.strip(),
        )


class ConfirmBet(BaseModel):
    """Both sides approved a pending bet."""

    model_config = ConfigDict(extra="forbid")

    action: Literal["confirm_bet"] = "confirm_bet"
    bet_id: str = Field(description="ID of the pending bet both participants confirmed")


class ResolveBet(BaseModel):
    """A participant asked for a confirmed bet to be settled."""

    model_config = ConfigDict(extra="forbid")

    action: Literal["resolve_bet"] = "resolve_bet"
    bet_id: str = Field(description="ID of the confirmed bet to resolve")
    winner: str | None = Field(
        default=None,
        description="User ID of the winner, or null when the condition has not resolved yet",
    )
    resolution_details: str = Field(
        description=(
            "One or two lines describing the event or outcome behind the resolution, "
            "or why the bet cannot be resolved yet"
        )
    )


Intent = Annotated[
    Union[NoAction, CreateBet, ConfirmBet, ResolveBet],
    Field(discriminator="action"),
]


class ClassifierVerdict(BaseModel):
    """Structured output of a single classifier run."""

    intent: Intent


_intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def decode_intent(payload: Any) -> NoAction | CreateBet | ConfirmBet | ResolveBet:
    """Decode a classifier payload into exactly one intent variant.

    Accepts a verdict, an intent model, a mapping or a JSON string. ``None``
    means the classifier chose not to act.

    Raises:
        MalformedIntent: If the payload does not match any variant.
    """
    if payload is None:
        return NoAction()
    if isinstance(payload, ClassifierVerdict):
        payload = payload.intent
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise MalformedIntent(f"Classifier returned invalid JSON: {e}") from e
        if payload is None:
            return NoAction()
    if isinstance(payload, dict) and "intent" in payload:
        payload = payload["intent"]

    try:
        return _intent_adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedIntent(f"Classifier returned an unknown intent: {e}") from e


def validate_intent(
    intent: NoAction | CreateBet | ConfirmBet | ResolveBet,
) -> NoAction | CreateBet | ConfirmBet | ResolveBet:
    """Downgrade a CreateBet that cannot form a valid bet to NoAction."""
    if not isinstance(intent, CreateBet):
        return intent
    try:
        intent.to_bet()
    except (ValidationError, ArithmeticError):
        return NoAction()
    return intent

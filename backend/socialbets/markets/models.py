"""Data models for bets and chat events."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ContentType = Literal["text", "payment_request", "other"]


class Bet(BaseModel):
    """A wager between two participants on a stated condition."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(gt=0)
    condition: str = Field(min_length=1)
    maker: str = Field(min_length=1)
    taker: str = Field(min_length=1)

    @model_validator(mode="after")
    def check_distinct_sides(self) -> "Bet":
        if self.maker.strip().casefold() == self.taker.strip().casefold():
            raise ValueError("maker and taker must be different participants")
        return self


class ChatEvent(BaseModel):
    """Inbound message event as delivered by the transport."""

    model_config = ConfigDict(frozen=True)

    id: str
    sender_id: str
    conversation_id: str
    content: str | None = None
    content_type: ContentType = "text"
    sender_name: str | None = None


class ChatMessage(BaseModel):
    """One entry of the conversation context passed to the classifier."""

    model_config = ConfigDict(frozen=True)

    sender: str
    text: str
    display_name: str | None = None


class PaymentRequest(BaseModel):
    """Transfer owed by the losing side of a resolved bet."""

    bet_id: str
    amount_units: int = Field(ge=0)
    payer: str
    payee: str

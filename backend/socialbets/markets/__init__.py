"""Bet lifecycle state: registry, dedup, conversation context."""

from .context import ConversationContext
from .dedup import EventDeduplicator
from .exceptions import (
    ConflictError,
    IdentityResolutionError,
    MalformedIntent,
    NotFoundError,
    OracleUnavailable,
    SocialBetsError,
)
from .models import Bet, ChatEvent, ChatMessage, PaymentRequest
from .registry import BetRegistry

__all__ = [
    "Bet",
    "BetRegistry",
    "ChatEvent",
    "ChatMessage",
    "ConversationContext",
    "EventDeduplicator",
    "PaymentRequest",
    "SocialBetsError",
    "ConflictError",
    "NotFoundError",
    "OracleUnavailable",
    "MalformedIntent",
    "IdentityResolutionError",
]

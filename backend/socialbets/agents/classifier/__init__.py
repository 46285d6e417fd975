"""Intent classifier for bet market conversations."""

from .main import IntentClassifier, get_classifier_agent
from .models import (
    ClassifierVerdict,
    ConfirmBet,
    CreateBet,
    NoAction,
    ResolveBet,
    decode_intent,
    validate_intent,
)

__all__ = [
    "IntentClassifier",
    "get_classifier_agent",
    "ClassifierVerdict",
    "NoAction",
    "CreateBet",
    "ConfirmBet",
    "ResolveBet",
    "decode_intent",
    "validate_intent",
]

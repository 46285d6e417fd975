"""Telegram group chat transport."""

from .client import TelegramTransport
from .config import TelegramConfig
from .exceptions import (
    TelegramAuthError,
    TelegramConfigError,
    TelegramError,
    TelegramNetworkError,
    TelegramRateLimitError,
)
from .models import format_payment_message, make_event_id, message_to_event

__all__ = [
    "TelegramTransport",
    "TelegramConfig",
    "TelegramError",
    "TelegramAuthError",
    "TelegramRateLimitError",
    "TelegramNetworkError",
    "TelegramConfigError",
    "format_payment_message",
    "make_event_id",
    "message_to_event",
]

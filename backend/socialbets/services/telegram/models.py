"""Conversion between Telegram updates and chat events."""

from __future__ import annotations

import html
import json
from typing import Any

from socialbets.markets.models import ChatEvent
from socialbets.payments.usdc import WalletSendCalls


def make_event_id(chat_id: int | str, message_id: int | str) -> str:
    """Telegram message ids are only unique per chat."""
    return f"{chat_id}:{message_id}"


def message_to_event(message: Any) -> ChatEvent | None:
    """Build a ChatEvent from a telegram Message, or None if it has no sender."""
    if message is None or message.from_user is None:
        return None

    user = message.from_user
    text = message.text
    return ChatEvent(
        id=make_event_id(message.chat.id, message.message_id),
        sender_id=str(user.id),
        conversation_id=str(message.chat.id),
        content=text,
        content_type="text" if text else "other",
        sender_name=user.username or user.full_name,
    )


def format_payment_message(calls: WalletSendCalls) -> str:
    """Render a send-calls payload as an HTML chat message."""
    call = calls.calls[0]
    payload = json.dumps(calls.to_payload(), indent=2)
    return (
        f"<b>Payment request</b>\n"
        f"{html.escape(call.metadata.description)} from {html.escape(calls.from_address)}\n"
        f"<pre>{html.escape(payload)}</pre>"
    )

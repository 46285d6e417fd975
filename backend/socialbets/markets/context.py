"""Rolling conversation log handed to the classifier."""

from collections import deque

from socialbets.markets.models import ChatMessage


class ConversationContext:
    """Append-only log of chat messages in stream-delivery order."""

    def __init__(self, max_messages: int = 0):
        self._messages: deque[ChatMessage] = deque(maxlen=max_messages or None)

    def __len__(self) -> int:
        return len(self._messages)

    def append(
        self,
        sender: str,
        text: str,
        display_name: str | None = None,
    ) -> ChatMessage:
        message = ChatMessage(sender=sender, text=text, display_name=display_name)
        self._messages.append(message)
        return message

    def snapshot(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

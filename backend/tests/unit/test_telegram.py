"""
Unit Tests: Telegram transport

Test cases:
- Update -> ChatEvent conversion
- Connect reads agent identity; auth failures are wrapped
- Polling advances the offset and skips updates without a message
- Sends return event ids; Telegram errors map to service exceptions
- Participant address book lookup
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from telegram import error as tg_error

from conftest import MAKER, TAKER
from socialbets.payments import USDCHandler
from socialbets.services.telegram import (
    TelegramAuthError,
    TelegramConfigError,
    TelegramNetworkError,
    TelegramRateLimitError,
    TelegramTransport,
    format_payment_message,
    message_to_event,
)


def _message(message_id: int, text: str | None = "hi", user_id: int = 1, username: str | None = "alice"):
    return SimpleNamespace(
        message_id=message_id,
        chat=SimpleNamespace(id=-100123),
        from_user=SimpleNamespace(id=user_id, username=username, full_name="Alice A"),
        text=text,
    )


def _mock_bot() -> AsyncMock:
    bot = AsyncMock()
    bot.get_me.return_value = SimpleNamespace(id=999, username="socialbets_bot")
    bot.send_message.return_value = SimpleNamespace(
        chat=SimpleNamespace(id=-100123), message_id=42
    )
    return bot


def _transport(bot: AsyncMock | None = None, participants=None) -> TelegramTransport:
    return TelegramTransport(
        bot=bot or _mock_bot(),
        participants=participants or {"1": MAKER, "@Bob": TAKER},
    )


def test_message_to_event() -> None:
    event = message_to_event(_message(7, text="I bet you $5"))

    assert event.id == "-100123:7"
    assert event.sender_id == "1"
    assert event.conversation_id == "-100123"
    assert event.content == "I bet you $5"
    assert event.content_type == "text"
    assert event.sender_name == "alice"


def test_message_to_event_non_text_and_missing_sender() -> None:
    event = message_to_event(_message(8, text=None, username=None))
    assert event.content_type == "other"
    assert event.sender_name == "Alice A"

    orphan = _message(9)
    orphan.from_user = None
    assert message_to_event(orphan) is None
    assert message_to_event(None) is None


def test_requires_token_without_bot() -> None:
    with pytest.raises(TelegramConfigError):
        TelegramTransport()


def test_connect_reads_agent_identity() -> None:
    transport = _transport()

    async def run() -> None:
        async with transport:
            assert transport.agent_id == "999"
            assert transport.agent_username == "socialbets_bot"

    asyncio.run(run())


def test_connect_wraps_auth_failure() -> None:
    bot = _mock_bot()
    bot.get_me.side_effect = tg_error.InvalidToken()
    transport = _transport(bot)

    with pytest.raises(TelegramAuthError):
        asyncio.run(transport.__aenter__())


def test_stream_events_advances_offset() -> None:
    bot = _mock_bot()
    bot.get_updates.side_effect = [
        [
            SimpleNamespace(update_id=10, message=_message(1)),
            SimpleNamespace(update_id=11, message=None),
        ],
        [SimpleNamespace(update_id=12, message=_message(2, text="deal"))],
    ]
    transport = _transport(bot)

    async def run() -> list:
        stream = transport.stream_events()
        events = [await anext(stream), await anext(stream)]
        await stream.aclose()
        return events

    events = asyncio.run(run())

    assert [e.id for e in events] == ["-100123:1", "-100123:2"]
    offsets = [call.kwargs["offset"] for call in bot.get_updates.call_args_list]
    assert offsets == [None, 12]


def test_stream_events_retries_after_network_error() -> None:
    bot = _mock_bot()
    bot.get_updates.side_effect = [
        tg_error.NetworkError("connection reset"),
        [SimpleNamespace(update_id=1, message=_message(5))],
    ]
    transport = _transport(bot)
    transport.config.retry_delay_seconds = 0

    async def run():
        stream = transport.stream_events()
        event = await anext(stream)
        await stream.aclose()
        return event

    assert asyncio.run(run()).id == "-100123:5"


def test_send_text_returns_event_id() -> None:
    bot = _mock_bot()
    transport = _transport(bot)

    message_id = asyncio.run(transport.send_text("-100123", "Bet confirmed"))

    assert message_id == "-100123:42"
    bot.send_message.assert_awaited_once_with(chat_id="-100123", text="Bet confirmed")


def test_send_payment_request_renders_payload() -> None:
    bot = _mock_bot()
    transport = _transport(bot)
    calls = USDCHandler("base-sepolia").create_transfer_calls(TAKER, MAKER, 5_000_000)

    message_id = asyncio.run(transport.send_payment_request("-100123", calls))

    assert message_id == "-100123:42"
    text = bot.send_message.call_args.kwargs["text"]
    assert text == format_payment_message(calls)
    assert "&quot;chainId&quot;" in text
    assert bot.send_message.call_args.kwargs["parse_mode"] == "HTML"


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (tg_error.NetworkError("down"), TelegramNetworkError),
        (tg_error.TimedOut(), TelegramNetworkError),
        (tg_error.RetryAfter(5), TelegramRateLimitError),
        (tg_error.Forbidden("bot was kicked"), TelegramAuthError),
    ],
)
def test_send_errors_are_wrapped(error: Exception, expected: type) -> None:
    bot = _mock_bot()
    bot.send_message.side_effect = error
    transport = _transport(bot)

    with pytest.raises(expected):
        asyncio.run(transport.send_text("-100123", "hello"))


def test_resolve_participant_by_id_then_username() -> None:
    transport = _transport()

    async def run():
        return (
            await transport.resolve_participant("1"),
            await transport.resolve_participant("2", "bob"),
            await transport.resolve_participant("3", "carol"),
        )

    assert asyncio.run(run()) == (MAKER, TAKER, None)

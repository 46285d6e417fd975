"""Telegram group chat transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

from telegram import Bot
from telegram import error as tg_error
from telegram.constants import ParseMode
from telegram.request import HTTPXRequest

from socialbets.markets.models import ChatEvent
from socialbets.payments.usdc import WalletSendCalls

from .config import TelegramConfig
from .exceptions import (
    TelegramAuthError,
    TelegramConfigError,
    TelegramError,
    TelegramNetworkError,
    TelegramRateLimitError,
)
from .models import format_payment_message, make_event_id, message_to_event

logger = logging.getLogger(__name__)


class TelegramTransport:
    """Async Telegram transport: long-polls group messages and sends replies."""

    def __init__(
        self,
        config: TelegramConfig | None = None,
        bot_token: str | None = None,
        participants: Mapping[str, str] | None = None,
        bot: Bot | None = None,
    ):
        """Initialize Telegram transport."""
        self.config = config or TelegramConfig()

        if bot_token:
            self.config.bot_token = bot_token

        if not self.config.bot_token and bot is None:
            raise TelegramConfigError(
                "bot_token is required. Provide via config or constructor."
            )

        self._participants = _normalize_address_book(participants or {})
        self._bot: Bot | None = bot
        self.agent_id: str = ""
        self.agent_username: str | None = None

    async def __aenter__(self) -> TelegramTransport:
        """Connect the bot and read its own identity."""
        if self._bot is None:
            self._bot = Bot(
                token=self.config.bot_token,
                request=HTTPXRequest(read_timeout=self.config.request_timeout_seconds),
                get_updates_request=HTTPXRequest(
                    read_timeout=self.config.poll_timeout_seconds + 10
                ),
            )
        try:
            await self._bot.initialize()
            bot_info = await self._bot.get_me()
        except tg_error.TelegramError as e:
            logger.error(f"Failed to initialize Telegram bot: {e}")
            raise TelegramAuthError(f"Invalid bot token: {e}") from e

        self.agent_id = str(bot_info.id)
        self.agent_username = bot_info.username
        logger.info(f"Connected to Telegram bot: @{bot_info.username}")
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        if self._bot:
            await self._bot.shutdown()
            logger.info("Closed TelegramTransport")

    @property
    def bot(self) -> Bot:
        """Return bot instance."""
        if self._bot is None:
            raise RuntimeError(
                "TelegramTransport must be used as async context manager"
            )
        return self._bot

    async def stream_events(self) -> AsyncIterator[ChatEvent]:
        """Yield message events in delivery order, forever."""
        offset: int | None = None

        while True:
            try:
                updates = await self.bot.get_updates(
                    offset=offset,
                    timeout=self.config.poll_timeout_seconds,
                    allowed_updates=["message"],
                )
            except tg_error.RetryAfter as e:
                retry_after = _seconds(e.retry_after)
                logger.warning(f"Telegram rate limited polling, retrying in {retry_after}s")
                await asyncio.sleep(retry_after)
                continue
            except tg_error.NetworkError as e:
                logger.warning(f"Telegram polling failed: {e}")
                await asyncio.sleep(self.config.retry_delay_seconds)
                continue

            for update in updates:
                offset = update.update_id + 1
                event = message_to_event(update.message)
                if event is not None:
                    yield event

    async def send_text(self, conversation_id: str, text: str) -> str:
        """Send a plain text message and return its event id."""
        message = await self._send(chat_id=conversation_id, text=text)
        return make_event_id(message.chat.id, message.message_id)

    async def send_payment_request(
        self,
        conversation_id: str,
        calls: WalletSendCalls,
    ) -> str:
        """Send a wallet send-calls payload and return its event id."""
        message = await self._send(
            chat_id=conversation_id,
            text=format_payment_message(calls),
            parse_mode=ParseMode.HTML,
        )
        return make_event_id(message.chat.id, message.message_id)

    async def resolve_participant(
        self,
        sender_id: str,
        sender_name: str | None = None,
    ) -> str | None:
        """Look up a sender's wallet address by user id, then by username."""
        address = self._participants.get(sender_id)
        if address is None and sender_name:
            address = self._participants.get(_normalize_key(sender_name))
        return address

    async def _send(self, **kwargs: Any) -> Any:
        try:
            message = await self.bot.send_message(**kwargs)
        except tg_error.RetryAfter as e:
            raise TelegramRateLimitError(str(e), retry_after=_seconds(e.retry_after)) from e
        except tg_error.Forbidden as e:
            raise TelegramAuthError(e.message, status_code=403) from e
        except tg_error.NetworkError as e:
            raise TelegramNetworkError(e.message) from e
        except tg_error.TelegramError as e:
            raise TelegramError(e.message) from e

        logger.info(
            f"Message sent successfully to {kwargs['chat_id']} "
            f"(message_id: {message.message_id})"
        )
        return message


def _seconds(value: Any) -> float:
    if hasattr(value, "total_seconds"):
        return value.total_seconds()
    return float(value)


def _normalize_key(key: str) -> str:
    return key.strip().lstrip("@").lower()


def _normalize_address_book(participants: Mapping[str, str]) -> dict[str, str]:
    return {_normalize_key(str(key)): value for key, value in participants.items()}

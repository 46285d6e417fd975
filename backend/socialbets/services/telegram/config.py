"""Telegram transport config."""

from pydantic import BaseModel


class TelegramConfig(BaseModel):
    """Telegram config."""

    bot_token: str = ""
    poll_timeout_seconds: int = 30
    retry_delay_seconds: float = 2.0
    request_timeout_seconds: float = 30.0

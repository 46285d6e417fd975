"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from socialbets import __version__
from socialbets.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire with instrumentation for the bet agent.

    Must be called ONCE at application startup, BEFORE the classifier runs.

    Instruments:
    - PydanticAI classifier agent runs
    - OpenAI SDK (model calls, web search, token usage)
    - HTTPX clients (Telegram Bot API)
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing Logfire token

    Returns:
        True if Logfire was configured, False if it was skipped or failed.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="socialbets",
            service_version=__version__,
            environment=settings.payments.network_id,
        )

        logfire.instrument_pydantic_ai()
        logfire.instrument_openai()
        logfire.instrument_httpx()

        # Bridge Python logging to Logfire
        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("✓ Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False

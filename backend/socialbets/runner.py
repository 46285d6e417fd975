"""Agent wiring: Telegram transport -> Bet Orchestrator -> classifier."""

import logging

from socialbets.agents.classifier import IntentClassifier
from socialbets.config import Settings
from socialbets.markets.dedup import EventDeduplicator
from socialbets.markets.orchestrator import BetOrchestrator
from socialbets.payments.usdc import USDCHandler
from socialbets.services.telegram import TelegramConfig, TelegramTransport

logger = logging.getLogger("socialbets.runner")


def log_agent_details(transport: TelegramTransport, settings: Settings) -> None:
    """Log who the agent is and where it settles payments."""
    logger.info("Agent id: %s", transport.agent_id)
    if transport.agent_username:
        logger.info("Agent username: @%s", transport.agent_username)
        logger.info("Add the agent to a group: https://t.me/%s", transport.agent_username)
    logger.info("Classifier model: %s", settings.classifier.model.value)
    logger.info("Payment network: %s", settings.payments.network_id)
    logger.info("Known participants: %d", len(settings.participants))


def build_orchestrator(
    settings: Settings,
    transport: TelegramTransport,
) -> BetOrchestrator:
    """Construct the orchestrator and its collaborators from settings."""
    return BetOrchestrator(
        transport=transport,
        classifier=IntentClassifier(timeout_seconds=settings.classifier.timeout_seconds),
        payments=USDCHandler(settings.payments.network_id),
        deduplicator=EventDeduplicator(max_entries=settings.dedup.max_entries),
        max_context_messages=settings.chat.max_context_messages,
        welcome_enabled=settings.chat.welcome_enabled,
        notify_on_oracle_failure=settings.classifier.notify_on_failure,
    )


async def run_agent(settings: Settings) -> None:
    """Connect to Telegram and process group messages until interrupted."""
    telegram_config = TelegramConfig(
        bot_token=settings.telegram_bot_token,
        poll_timeout_seconds=settings.chat.poll_timeout_seconds,
    )

    async with TelegramTransport(
        config=telegram_config,
        participants=settings.participants,
    ) as transport:
        log_agent_details(transport, settings)
        orchestrator = build_orchestrator(settings, transport)
        await orchestrator.run()

    logger.info("Message stream ended. Agent stopped.")

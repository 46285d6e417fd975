"""Classifier Agent: maps the group conversation to a bet market intent."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic_ai import Agent, WebSearchTool
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior

from socialbets.agents.agent_factory import AgentFactory
from socialbets.agents.shared_tools import register_get_current_time
from socialbets.config import get_settings
from socialbets.llm_providers import get_model_string
from socialbets.markets.exceptions import MalformedIntent, OracleUnavailable
from socialbets.markets.models import Bet, ChatMessage

from .models import (
    ClassifierVerdict,
    ConfirmBet,
    CreateBet,
    NoAction,
    ResolveBet,
    decode_intent,
    validate_intent,
)
from .prompts import CLASSIFIER_SYSTEM_PROMPT, build_classifier_prompt

logger = logging.getLogger(__name__)


def _create_classifier_agent() -> Agent[None, ClassifierVerdict]:
    """Create the classifier agent from current settings."""
    settings = get_settings()
    builtin_tools = [WebSearchTool()] if settings.classifier.web_search else []
    return Agent(
        model=get_model_string(settings.classifier.model),
        output_type=ClassifierVerdict,
        system_prompt=CLASSIFIER_SYSTEM_PROMPT,
        builtin_tools=builtin_tools,
        name="classifier",
    )


_classifier_factory = AgentFactory(
    create_fn=_create_classifier_agent,
    register_tools_fn=register_get_current_time,
)


def get_classifier_agent() -> Agent[None, ClassifierVerdict]:
    """Get the singleton classifier agent instance."""
    return _classifier_factory.get_agent()


class IntentClassifier:
    """Oracle adapter turning conversation snapshots into a validated intent.

    Every failure surfaces as one of two errors the orchestrator knows how to
    recover from: ``OracleUnavailable`` for upstream failures and timeouts,
    ``MalformedIntent`` for payloads that do not decode.
    """

    def __init__(
        self,
        agent: Any | None = None,
        timeout_seconds: float = 60.0,
    ):
        self._agent = agent
        self.timeout_seconds = timeout_seconds

    @property
    def agent(self) -> Any:
        if self._agent is None:
            self._agent = get_classifier_agent()
        return self._agent

    async def classify(
        self,
        context: Sequence[ChatMessage],
        pending: Mapping[str, Bet],
        confirmed: Mapping[str, Bet],
    ) -> NoAction | CreateBet | ConfirmBet | ResolveBet:
        prompt = build_classifier_prompt(context, pending, confirmed)

        try:
            result = await asyncio.wait_for(
                self.agent.run(prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise OracleUnavailable(
                f"Classifier timed out after {self.timeout_seconds:.0f}s"
            ) from e
        except ModelHTTPError as e:
            raise OracleUnavailable(
                f"Classifier API returned status {e.status_code}"
            ) from e
        except UnexpectedModelBehavior as e:
            raise MalformedIntent(f"Classifier output rejected: {e}") from e
        except Exception as e:
            raise OracleUnavailable(f"Classifier call failed: {e}") from e

        intent = validate_intent(decode_intent(result.output))
        logger.info("Classifier verdict: %s", intent.action)
        logger.debug("Classifier payload: %s", intent.model_dump())
        return intent

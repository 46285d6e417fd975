"""Shared tools for PydanticAI agents."""

from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic_ai import Agent, RunContext

T = TypeVar("T")


def register_get_current_time(agent: Agent[T, Any]) -> None:
    """Register get_current_time tool on any agent."""

    @agent.tool
    def get_current_time(ctx: RunContext[T]) -> str:
        """Get the current UTC timestamp in ISO 8601 format."""
        return datetime.now(timezone.utc).isoformat()

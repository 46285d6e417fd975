"""LLM Provider and Model Enums for model selection.

The classifier picks its model from these enums so the oracle can be
hotswapped from config without touching agent code.
"""

from enum import StrEnum


class LLMProvider(StrEnum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class OpenAIModel(StrEnum):
    """OpenAI models available via API."""

    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"


class AnthropicModel(StrEnum):
    """Anthropic Claude models available via API."""

    CLAUDE_SONNET_4_5 = "claude-sonnet-4-5"
    CLAUDE_HAIKU_4_5 = "claude-haiku-4-5"


# =============================================================================
# Helper Functions
# =============================================================================


def get_model_string(model: OpenAIModel | AnthropicModel) -> str:
    """Get the API model string for any supported model.

    For OpenAI models, uses the 'openai-responses:' prefix to leverage the
    Responses API, which supports built-in tools like WebSearchTool.
    """
    if isinstance(model, OpenAIModel):
        return f"openai-responses:{model.value}"
    elif isinstance(model, AnthropicModel):
        return f"anthropic:{model.value}"
    return model.value


def get_provider_for_model(model: OpenAIModel | AnthropicModel) -> LLMProvider:
    """Determine the provider for a given model."""
    if isinstance(model, OpenAIModel):
        return LLMProvider.OPENAI
    elif isinstance(model, AnthropicModel):
        return LLMProvider.ANTHROPIC
    else:
        raise ValueError(f"Unknown model type: {type(model)}")

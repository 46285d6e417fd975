"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from socialbets.llm_providers import (
    AnthropicModel,
    LLMProvider,
    OpenAIModel,
    get_provider_for_model,
)
from socialbets.payments.usdc import is_address

logger = logging.getLogger(__name__)


def check_participants(participants: dict[str, str]) -> dict[str, str]:
    """Normalize the address book and reject entries that are not wallet addresses."""
    checked = {}
    for key, address in participants.items():
        address = str(address).strip()
        if not is_address(address):
            raise ValueError(f"Participant {key} has an invalid wallet address: {address}")
        checked[str(key)] = address
    return checked


class ClassifierConfig(BaseModel):
    """Intent classifier (LLM oracle) parameters."""

    model: OpenAIModel | AnthropicModel = OpenAIModel.GPT_4_1
    timeout_seconds: float = 60.0
    web_search: bool = True
    notify_on_failure: bool = True  # Post a chat notice when the oracle is down


class PaymentsConfig(BaseModel):
    """Payment request parameters."""

    network_id: Literal["base-sepolia", "base-mainnet"] = "base-sepolia"


class ChatConfig(BaseModel):
    """Chat loop parameters."""

    poll_timeout_seconds: int = 30
    max_context_messages: int = 0  # 0 keeps the whole conversation
    welcome_enabled: bool = True


class DedupConfig(BaseModel):
    """Seen-event tracking parameters."""

    max_entries: int = 0  # 0 never evicts


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    data_dir: Path = Path("data")

    # API Keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    logfire_token: str = ""

    # Telegram
    telegram_bot_token: str = ""

    # Nested configuration sections
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    payments: PaymentsConfig = Field(default_factory=PaymentsConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)

    # Telegram user id or username -> wallet address
    participants: dict[str, str] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("participants", mode="after")
    @classmethod
    def validate_participants(cls, v: dict[str, str]) -> dict[str, str]:
        return check_participants(v)

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    def validate_required(self) -> list[str]:
        """Return the names of required secrets that are not set."""
        if get_provider_for_model(self.classifier.model) == LLMProvider.ANTHROPIC:
            llm_key = ("ANTHROPIC_API_KEY", self.anthropic_api_key)
        else:
            llm_key = ("OPENAI_API_KEY", self.openai_api_key)
        required = dict([llm_key, ("TELEGRAM_BOT_TOKEN", self.telegram_bot_token)])
        return [name for name, value in required.items() if not value]

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration."""
        config_path = self.data_dir / "config.yaml"

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["classifier", "payments", "chat", "dedup"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    yaml_section = yaml_config[section_name]

                    section_dict = section.model_dump()
                    section_dict.update(yaml_section)

                    new_section = section.__class__(**section_dict)
                    setattr(self, section_name, new_section)

            participants = yaml_config.get("participants") or {}
            self.participants = check_participants({**self.participants, **participants})

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings

"""Social Bets CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from socialbets import __version__
from socialbets.config import get_settings
from socialbets.runner import run_agent

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Reduce noise from HTTP libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from socialbets.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== Social Bets Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("Classifier:")
        print(f"  Model: {settings.classifier.model.value}")
        print(f"  Timeout: {settings.classifier.timeout_seconds:.0f}s")
        print(f"  Web Search: {settings.classifier.web_search}")
        print(f"  Notify On Failure: {settings.classifier.notify_on_failure}\n")

        print("Payments:")
        print(f"  Network: {settings.payments.network_id}\n")

        print("Chat:")
        print(f"  Poll Timeout: {settings.chat.poll_timeout_seconds}s")
        max_context = settings.chat.max_context_messages
        print(f"  Max Context Messages: {max_context or 'unbounded'}")
        print(f"  Welcome Message: {settings.chat.welcome_enabled}")
        print(f"  Seen-Event Cap: {settings.dedup.max_entries or 'unbounded'}\n")

        print(f"Participants: {len(settings.participants)}")
        for key, address in sorted(settings.participants.items()):
            print(f"  {key}: {address}")
        print()

        print("API Keys:")
        print(f"  OpenAI: {'✓ Set' if settings.openai_api_key else '✗ Not set'}")
        print(f"  Anthropic: {'✓ Set' if settings.anthropic_api_key else '✗ Not set'}")
        print(f"  Telegram: {'✓ Set' if settings.telegram_bot_token else '✗ Not set'}")
        print(f"  Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1
    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        print(f"\n❌ Failed to load configuration: {e}\n")
        return 1


def cmd_run(args: argparse.Namespace) -> int:
    """Start the bet agent."""
    try:
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        settings = get_settings()
        missing = settings.validate_required()
        if missing:
            print(f"\n❌ Missing required environment variables: {', '.join(missing)}\n")
            return 1

        _init_logfire()

        print("\n=== Social Prediction Markets Agent ===\n")
        print(f"Version: {__version__}")
        print(f"Model: {settings.classifier.model.value}")
        print(f"Network: {settings.payments.network_id}\n")

        asyncio.run(run_agent(settings))
        return 0

    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal. Shutting down...\n")
        return 0
    except Exception as e:
        logger.error(f"Failed to start agent: {e}", exc_info=True)
        print(f"\nFailed to start: {e}\n")
        return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Social Bets: group-chat prediction market agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Social Bets {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_run = subparsers.add_parser(
        "run",
        help="Start the bet agent",
    )
    parser_run.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_run.set_defaults(func=cmd_run)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""Main entry point for the F.R.I.D.A.Y. CLI.

Handles provider selection, tool registration and the interactive loop.
"""

import argparse
import sys

import yaml

from .agent import Assistant
from .clients.factory import create_client, get_available_providers
from .config import Settings, get_settings
from .exceptions import AgentError, ModelUnavailableError
from .logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_COMMANDS = ("/bye", "exit", "quit")


def load_yaml_config(path: str = "config.yaml") -> dict:
    """Load configuration from config.yaml if it exists."""
    try:
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}


def get_provider_and_model(
    args: argparse.Namespace,
    yaml_config: dict,
    settings: Settings,
) -> tuple[str | None, str | None]:
    """Determine the provider and model to use.

    Priority order:
    1. CLI arguments
    2. Config file (config.yaml)
    3. Environment variables (via pydantic settings)
    4. Auto-detection based on available API keys
    """
    llm_config = yaml_config.get("llm", {})

    provider = args.provider or llm_config.get("provider") or settings.detect_provider()
    model = args.model or llm_config.get("model") or settings.llm_model

    return provider, model


def build_assistant(settings: Settings, provider: str, model: str | None, yaml_config: dict) -> Assistant:
    """Create the client for ``provider`` and the assistant around it.

    Raises:
        ValueError: If the provider is unknown or has no API key.
    """
    # client parameters such as temperature come from the llm section
    llm_config = yaml_config.get("llm", {})
    client_config = {k: v for k, v in llm_config.items() if k not in ["provider", "model"]}

    client = create_client(provider, settings, model=model, client_config=client_config)
    return Assistant.from_settings(settings, client)


def _start_server(host: str, port: int) -> None:
    """Start the API server."""
    try:
        import uvicorn
        from .api import app
    except ImportError:
        print("Error: API dependencies not installed.")
        print("Install with: pip install 'friday-assistant[api]'")
        sys.exit(1)

    print(f"Starting API server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    uvicorn.run(app, host=host, port=port)


def main():
    """Main entry point for the F.R.I.D.A.Y. CLI."""
    parser = argparse.ArgumentParser(description="F.R.I.D.A.Y. desktop assistant")
    parser.add_argument(
        "--provider",
        choices=get_available_providers(),
        help="LLM provider to use (overrides config and auto-detection)"
    )
    parser.add_argument(
        "--model",
        help="LLM model to use (overrides config)"
    )
    parser.add_argument(
        "--session-id",
        help="Continue (or start) the session with this id"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (also settable via FRIDAY_LOG_LEVEL env var)"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the API server instead of CLI"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the API server (default: 8000)"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for the API server (default: 127.0.0.1)"
    )
    args = parser.parse_args()

    # setup logging early
    setup_logging(args.log_level)

    if args.serve:
        _start_server(args.host, args.port)
        return

    settings = get_settings()
    yaml_config = load_yaml_config()
    provider, model = get_provider_and_model(args, yaml_config, settings)

    if not provider:
        print("Error: No LLM provider specified and no API keys found.")
        print("Please set one of the following:")
        print("  - LLM_PROVIDER environment variable")
        print("  - provider in config.yaml")
        print("  - GROQ_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY or TOGETHER_API_KEY")
        sys.exit(1)

    print(f"Using provider: {provider}")
    if model:
        print(f"Using model: {model}")

    try:
        assistant = build_assistant(settings, provider, model, yaml_config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    session_id = args.session_id or settings.session_id or assistant.new_session()
    run_repl(assistant, session_id)


def run_repl(assistant: Assistant, session_id: str) -> None:
    """Run the interactive loop until /bye, exit, quit or end of input.

    Args:
        assistant: The Assistant instance to use.
        session_id: Session every turn of this loop belongs to.
    """
    print("F.R.I.D.A.Y. online. Type '/bye' to quit.")
    print("-" * 50)

    while True:
        try:
            user_input = input("You: ")
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if user_input.strip().lower() in EXIT_COMMANDS:
            print("Goodbye!")
            break

        if not user_input.strip():
            continue

        try:
            result = assistant.run_turn(user_input, session_id=session_id)
            print(f"AI: {result.content or 'No content available'}")
        except ModelUnavailableError as e:
            print(f"AI: Sorry, I couldn't reach the model for that request ({e}). Please try again.")
        except AgentError as e:
            print(f"Agent error: {e}")
        except Exception as e:
            logger.exception("unexpected error during turn")
            print(f"Unexpected error: {type(e).__name__}: {e}")


if __name__ == "__main__":
    main()

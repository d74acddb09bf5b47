"""Provider table and client construction.

Provider SDKs are imported only when their client is built, so an install
with a single provider's key configured never loads the others.
"""

import importlib
from dataclasses import dataclass

from ..config import Settings, get_settings
from .base import BaseLLMClient


@dataclass(frozen=True)
class Provider:
    class_path: str
    key_env: str
    default_model: str


PROVIDERS: dict[str, Provider] = {
    "groq": Provider(
        "friday_assistant.clients.groq.GroqClient",
        "GROQ_API_KEY",
        "openai/gpt-oss-120b",
    ),
    "openai": Provider(
        "friday_assistant.clients.openai.OpenAIClient",
        "OPENAI_API_KEY",
        "gpt-4o",
    ),
    "anthropic": Provider(
        "friday_assistant.clients.anthropic.AnthropicClient",
        "ANTHROPIC_API_KEY",
        "claude-sonnet-4-5-20250929",
    ),
    "together": Provider(
        "friday_assistant.clients.together.TogetherClient",
        "TOGETHER_API_KEY",
        "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
    ),
}


def get_available_providers() -> list[str]:
    return list(PROVIDERS)


def _provider(name: str) -> Provider:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown provider: {name}. Available: {get_available_providers()}") from None


def get_default_model(provider: str) -> str:
    return _provider(provider).default_model


def create_client(
    provider: str,
    settings: Settings | None = None,
    model: str | None = None,
    client_config: dict | None = None,
) -> BaseLLMClient:
    """Build the client for ``provider`` with its key taken from the settings.

    Args:
        provider: groq, openai, anthropic or together.
        settings: Source of the API key; the process settings if omitted.
        model: Model override, the provider default otherwise.
        client_config: Generation parameters such as temperature.

    Raises:
        ValueError: If the provider is unknown or has no API key configured.
    """
    info = _provider(provider)
    settings = settings or get_settings()

    api_key = settings.get_api_key_for_provider(provider)
    if not api_key:
        raise ValueError(f"No API key for {provider}: set {info.key_env}")

    module_path, class_name = info.class_path.rsplit(".", 1)
    client_class = getattr(importlib.import_module(module_path), class_name)
    return client_class(
        api_key=api_key,
        model=model or info.default_model,
        client_config=client_config,
    )

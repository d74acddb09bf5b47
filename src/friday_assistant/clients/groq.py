"""Groq client implementation.

Groq serves an OpenAI-compatible endpoint, so this client is the OpenAI
client pointed at Groq's base URL. It is the default provider, with
temperature 0 unless configured otherwise.
"""

from typing import Any

from .openai import OpenAIClient

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqClient(OpenAIClient):
    """Groq API client with unified response handling."""

    provider_name = "groq"
    display_name = "Groq"
    base_url = GROQ_BASE_URL
    api_key_env = "GROQ_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "openai/gpt-oss-120b",
        client_config: dict | None = None,
    ):
        super().__init__(api_key, model, client_config)

    def _get_supported_config_keys(self) -> set[str]:
        return {"temperature", "top_p", "max_tokens", "stop", "reasoning_effort"}

    def _get_default_api_args(self) -> dict[str, Any]:
        return {"temperature": 0}

"""OpenAI client implementation.

This client handles communication with the OpenAI API and normalizes
responses to the unified format.
"""

import os
from contextlib import contextmanager
from typing import Any

from openai import APIConnectionError, APIStatusError, OpenAI
from openai import AuthenticationError as OpenAIAuthError
from openai import RateLimitError as OpenAIRateLimitError

from ..exceptions import (
    AuthenticationError,
    ClientError,
    ProviderUnavailableError,
    RateLimitError,
)
from .openai_compat import OpenAICompatibleClient


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI API client with unified response handling."""

    provider_name = "openai"
    display_name = "OpenAI"
    base_url: str | None = None
    api_key_env = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        client_config: dict | None = None,
    ):
        """Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            model: Model to use. Defaults to gpt-4o.
            client_config: Optional dictionary of configuration parameters.
        """
        super().__init__(api_key, model, client_config)

    def _create_client(self, api_key: str | None) -> OpenAI:
        """Create the OpenAI SDK client."""
        return OpenAI(
            api_key=api_key or os.environ.get(self.api_key_env),
            base_url=self.base_url,
        )

    def _get_supported_config_keys(self) -> set[str]:
        """Return config keys supported by OpenAI."""
        return {
            "temperature",
            "top_p",
            "max_tokens",
            "stop",
            "reasoning_effort",
            "presence_penalty",
            "frequency_penalty",
        }

    def _get_default_api_args(self) -> dict[str, Any]:
        """Return default API arguments for OpenAI."""
        return {}  # OpenAI uses API defaults

    @contextmanager
    def _handle_api_errors(self):
        """Map OpenAI SDK errors (also raised for Groq) onto ours."""
        name = self.display_name
        try:
            yield
        except OpenAIAuthError as e:
            raise AuthenticationError(f"{name} authentication failed: {e}") from e
        except OpenAIRateLimitError as e:
            retry_after = None
            if e.response is not None:
                try:
                    retry_after = float(e.response.headers.get("retry-after", ""))
                except ValueError:
                    pass
            raise RateLimitError(f"{name} rate limit exceeded", retry_after) from e
        except APIConnectionError as e:
            raise ProviderUnavailableError(f"{name} API unavailable: {e}") from e
        except APIStatusError as e:
            if e.status_code >= 500:
                raise ProviderUnavailableError(f"{name} API unavailable: {e}") from e
            raise ClientError(f"{name} request failed: {e}") from e

"""Base class for LLM clients.

All LLM provider clients inherit from BaseLLMClient and implement
the normalization methods to convert between provider-specific formats
and the unified types.
"""

import functools
import random
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from ..exceptions import ProviderUnavailableError, RateLimitError
from ..logging import get_logger
from ..types import MessageRole, ToolSpec, UnifiedMessage, UnifiedResponse

logger = get_logger(__name__)

T = TypeVar("T")


def with_retry(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for retrying API calls with exponential backoff.

    Retries on RateLimitError and ProviderUnavailableError. Other exceptions
    are raised immediately.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        initial_delay: Initial delay in seconds between retries (default: 1.0)
        max_delay: Maximum delay in seconds (default: 60.0)
        exponential_base: Base for exponential backoff (default: 2.0)
        jitter: Whether to add random jitter to delay (default: True)

    Returns:
        Decorated function with retry logic.

    Example:
        @with_retry(max_retries=3, initial_delay=1.0)
        def make_api_call():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except (RateLimitError, ProviderUnavailableError) as e:
                    if attempt == max_retries:
                        logger.warning(
                            f"max retries ({max_retries}) exceeded for {wrapper.__name__}: {e}"
                        )
                        raise

                    # a server-provided retry-after wins over the backoff schedule
                    retry_after = getattr(e, "retry_after", None)
                    actual_delay = min(retry_after or delay, max_delay)
                    if jitter and not retry_after:
                        actual_delay *= (0.5 + random.random())

                    logger.info(
                        f"retry {attempt + 1}/{max_retries} for {wrapper.__name__} "
                        f"after {actual_delay:.1f}s: {e}"
                    )
                    time.sleep(actual_delay)
                    delay *= exponential_base

            raise RuntimeError("Unexpected retry loop exit")

        return wrapper
    return decorator


def drop_orphan_tool_messages(messages: list[UnifiedMessage]) -> list[UnifiedMessage]:
    """Remove tool results whose requesting assistant message is not present.

    A window can start in the middle of a tool exchange; providers reject
    tool results that do not follow the assistant message carrying the call.
    """
    announced: set[str] = set()
    kept = []
    for message in messages:
        if message.role == MessageRole.ASSISTANT and message.tool_calls:
            announced.update(tc.id for tc in message.tool_calls)
        elif message.role == MessageRole.TOOL and message.tool_call_id not in announced:
            logger.debug(f"dropping orphaned tool result {message.tool_call_id}")
            continue
        kept.append(message)
    return kept


class BaseLLMClient(ABC):
    """Abstract base class for all LLM clients.

    Each client is responsible for:
    1. Converting UnifiedMessage list to provider format
    2. Converting tool specs to provider format
    3. Making API calls
    4. Converting responses back to UnifiedResponse

    The assistant only interacts with unified types - all provider-specific
    handling is encapsulated within each client implementation.
    """

    provider_name = "unknown"

    def __init__(self, client_config: dict | None = None):
        """Initialize the client.
        Args:
            client_config: Optional dictionary of configuration parameters
                           (e.g. temperature, max_tokens, etc.)
        """
        self.client_config = client_config or {}

    @abstractmethod
    def generate(
        self,
        messages: list[UnifiedMessage],
        tools: list[ToolSpec] | None = None,
    ) -> UnifiedResponse:
        """Generate a response from the LLM.

        Args:
            messages: Conversation window in unified format
            tools: Optional list of tool specs available to the model

        Returns:
            UnifiedResponse holding the assistant message
        """

    @abstractmethod
    def _convert_messages(self, messages: list[UnifiedMessage]) -> Any:
        """Convert unified messages to provider-specific format.

        Each provider has different message formats:
        - OpenAI/Groq/Together: list of dicts with role/content/tool_calls
        - Anthropic: system separated, content blocks for tools

        Args:
            messages: List of UnifiedMessage objects

        Returns:
            Provider-specific message format
        """

    @abstractmethod
    def _convert_tools(self, tools: list[ToolSpec]) -> list[dict[str, Any]]:
        """Convert tool specs to provider-specific format.

        - OpenAI/Groq/Together: {type: "function", function: {name, description, parameters}}
        - Anthropic: {name, description, input_schema}

        Args:
            tools: List of ToolSpec objects

        Returns:
            Provider-specific tool definitions
        """

    @abstractmethod
    def _parse_response(self, response: Any) -> UnifiedResponse:
        """Parse provider response into unified format.

        Args:
            response: Raw response from the provider API

        Returns:
            UnifiedResponse with normalized message and metadata
        """

"""LLM client implementations.

All clients implement the BaseLLMClient interface and normalize
provider-specific responses to unified types. Provider modules are imported
on demand by ``create_client`` so only the selected SDK has to load.
"""

from .base import BaseLLMClient, drop_orphan_tool_messages, with_retry
from .factory import create_client, get_available_providers, get_default_model

__all__ = [
    "BaseLLMClient",
    "create_client",
    "drop_orphan_tool_messages",
    "get_available_providers",
    "get_default_model",
    "with_retry",
]

"""Anthropic client implementation.

This client handles communication with the Anthropic API (Claude models)
and normalizes responses to the unified format.

Anthropic has unique requirements:
- System prompt is passed separately, not in messages
- Tool calls use content blocks with type "tool_use"
- Tool results go in user messages with type "tool_result"
"""

import os
from typing import Any

from anthropic import Anthropic, APIConnectionError, APIStatusError
from anthropic import AuthenticationError as AnthropicAuthError
from anthropic import RateLimitError as AnthropicRateLimitError

from ..exceptions import (
    AuthenticationError,
    ClientError,
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitError,
)
from ..types import (
    FinishReason,
    MessageRole,
    ToolCall,
    ToolSpec,
    UnifiedMessage,
    UnifiedResponse,
    UsageStats,
)
from .base import BaseLLMClient, drop_orphan_tool_messages

# supported configuration keys for anthropic
SUPPORTED_CONFIG_KEYS = {
    "temperature",
    "top_p",
    "top_k",
    "max_tokens",
    "stop_sequences",
    "tool_choice",
}


class AnthropicClient(BaseLLMClient):
    """Anthropic API client with unified response handling.

    Supports:
    - Generation parameters: temperature, top_p, top_k, stop_sequences
    - Tool choice configuration: auto, any, none, or specific tool
    """

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5-20250929",
        client_config: dict | None = None,
    ):
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to Claude Sonnet 4.5.
            client_config: Optional configuration parameters:
                - temperature: float (0.0-1.0, default 1.0)
                - top_p: float (nucleus sampling)
                - top_k: int (top-k sampling)
                - max_tokens: int (default 4096)
                - stop_sequences: list[str]
                - tool_choice: dict (e.g., {"type": "auto"}, {"type": "tool", "name": "..."})
        """
        super().__init__(client_config)
        self.client = Anthropic(api_key=api_key or os.environ.get("ANTHROPIC_API_KEY"))
        self.model = model
        self._validate_config()

    def _validate_config(self) -> None:
        unsupported = set(self.client_config.keys()) - SUPPORTED_CONFIG_KEYS
        if unsupported:
            raise ValueError(f"Unsupported config keys for Anthropic: {unsupported}")

    def generate(
        self,
        messages: list[UnifiedMessage],
        tools: list[ToolSpec] | None = None,
    ) -> UnifiedResponse:
        """Generate a response from Anthropic.

        Raises:
            AuthenticationError: If API key is invalid
            RateLimitError: If rate limit is exceeded
            ProviderUnavailableError: If API is unavailable
            InvalidResponseError: If the response cannot be parsed
        """
        system_prompt, converted_messages = self._convert_messages(messages)
        converted_tools = self._convert_tools(tools) if tools else None

        kwargs = self._build_api_kwargs(system_prompt, converted_messages, converted_tools)

        try:
            response = self.client.messages.create(**kwargs)
        except AnthropicAuthError as e:
            raise AuthenticationError(f"Anthropic authentication failed: {e}") from e
        except AnthropicRateLimitError as e:
            raise RateLimitError("Anthropic rate limit exceeded") from e
        except APIConnectionError as e:
            raise ProviderUnavailableError(f"Anthropic API unavailable: {e}") from e
        except APIStatusError as e:
            if e.status_code >= 500:
                raise ProviderUnavailableError(f"Anthropic API unavailable: {e}") from e
            raise ClientError(f"Anthropic request failed: {e}") from e

        return self._parse_response(response)

    def _build_api_kwargs(
        self,
        system_prompt: str | None,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
    ) -> dict[str, Any]:
        """Build the API kwargs from configuration."""
        config = self.client_config

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": config.get("max_tokens", 4096),
        }

        if system_prompt:
            kwargs["system"] = system_prompt
        if tools:
            kwargs["tools"] = tools

        for key in ("temperature", "top_p", "top_k", "stop_sequences"):
            if key in config:
                kwargs[key] = config[key]

        # tool choice (only if tools provided)
        if tools and "tool_choice" in config:
            kwargs["tool_choice"] = config["tool_choice"]

        return kwargs

    def _convert_messages(
        self, messages: list[UnifiedMessage]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Convert unified messages to Anthropic format.

        Every turn carries its own system message; the most recent one wins.
        Consecutive tool results are folded into a single user message, as
        Anthropic expects all results of one assistant message together.
        """
        system_prompt = None
        converted: list[dict[str, Any]] = []

        for msg in drop_orphan_tool_messages(messages):
            if msg.role == MessageRole.SYSTEM:
                system_prompt = msg.content

            elif msg.role == MessageRole.USER:
                converted.append({"role": "user", "content": msg.content})

            elif msg.role == MessageRole.ASSISTANT:
                content: list[dict[str, Any]] = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                for tc in msg.tool_calls or []:
                    content.append({
                        "type": "tool_use",
                        "id": tc.id,
                        "name": tc.name,
                        "input": tc.arguments,
                    })
                converted.append({"role": "assistant", "content": content})

            elif msg.role == MessageRole.TOOL:
                block = {
                    "type": "tool_result",
                    "tool_use_id": msg.tool_call_id,
                    "content": msg.content or "",
                }
                previous = converted[-1] if converted else None
                if (
                    previous
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and previous["content"][-1].get("type") == "tool_result"
                ):
                    previous["content"].append(block)
                else:
                    converted.append({"role": "user", "content": [block]})

        # the conversation has to open with a plain user message
        while converted and (converted[0]["role"] != "user" or isinstance(converted[0]["content"], list)):
            converted.pop(0)

        return system_prompt, converted

    def _convert_tools(self, tools: list[ToolSpec]) -> list[dict[str, Any]]:
        """Convert tool specs to Anthropic format with input_schema."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.parameters,
            }
            for tool in tools
        ]

    def _parse_response(self, response: Any) -> UnifiedResponse:
        """Parse Anthropic response into unified format."""
        try:
            tool_calls = []
            text_content = ""
            reasoning_content = ""

            for block in response.content:
                if block.type == "text":
                    text_content += block.text
                elif block.type == "thinking":
                    reasoning_content += block.thinking
                elif block.type == "tool_use":
                    tool_calls.append(ToolCall(
                        id=block.id,
                        name=block.name,
                        arguments=block.input or {},
                    ))

            finish_map = {
                "end_turn": FinishReason.STOP,
                "tool_use": FinishReason.TOOL_USE,
                "max_tokens": FinishReason.LENGTH,
            }

            return UnifiedResponse(
                message=UnifiedMessage(
                    role=MessageRole.ASSISTANT,
                    content=text_content if text_content else None,
                    reasoning_content=reasoning_content if reasoning_content else None,
                    tool_calls=tool_calls if tool_calls else None,
                ),
                finish_reason=finish_map.get(response.stop_reason, FinishReason.STOP),
                usage=UsageStats(
                    prompt_tokens=response.usage.input_tokens,
                    completion_tokens=response.usage.output_tokens,
                    total_tokens=response.usage.input_tokens + response.usage.output_tokens,
                ),
            )
        except Exception as e:
            raise InvalidResponseError(f"Failed to parse Anthropic response: {e}") from e

"""Shared test fixtures and configuration."""

import time
from unittest.mock import MagicMock

import pytest

from friday_assistant.clients.base import BaseLLMClient
from friday_assistant.exceptions import ToolExecutionError
from friday_assistant.sessions import InMemorySessionStore
from friday_assistant.tools.registry import ToolRegistry
from friday_assistant.types import (
    FinishReason,
    MessageRole,
    ToolCall,
    ToolSpec,
    UnifiedMessage,
    UnifiedResponse,
    UsageStats,
)


def _echo(text: str) -> str:
    return f"echo: {text}"


def _fail(reason: str = "boom") -> str:
    raise ToolExecutionError("fail", f"Failed because {reason}.")


def _crash() -> str:
    raise RuntimeError("unexpected crash")


def _sleep(seconds: float) -> str:
    time.sleep(seconds)
    return "woke up"


def _numbers() -> list:
    return [1, 2, 3]


@pytest.fixture
def echo_spec():
    return ToolSpec(
        name="echo",
        description="Echo the given text.",
        parameters={
            "type": "object",
            "properties": {"text": {"type": "string"}},
            "required": ["text"],
        },
        invoke=_echo,
    )


@pytest.fixture
def registry(echo_spec):
    """Frozen registry with a handful of well-behaved and misbehaving tools."""
    reg = ToolRegistry([
        echo_spec,
        ToolSpec(
            name="fail",
            description="Always fails.",
            parameters={"type": "object", "properties": {"reason": {"type": "string"}}},
            invoke=_fail,
        ),
        ToolSpec(
            name="crash",
            description="Raises an unexpected error.",
            parameters={"type": "object", "properties": {}},
            invoke=_crash,
        ),
        ToolSpec(
            name="sleep",
            description="Sleeps for a while.",
            parameters={
                "type": "object",
                "properties": {"seconds": {"type": "number"}},
                "required": ["seconds"],
            },
            invoke=_sleep,
            timeout=0.3,
        ),
        ToolSpec(
            name="numbers",
            description="Returns a list.",
            parameters={"type": "object", "properties": {}},
            invoke=_numbers,
        ),
    ])
    return reg.freeze()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def mock_client():
    """Create a mock LLM client."""
    client = MagicMock(spec=BaseLLMClient)
    client.provider_name = "mock"
    return client


@pytest.fixture
def answer():
    """Factory for a final-answer response."""
    def make(text: str) -> UnifiedResponse:
        return UnifiedResponse(
            message=UnifiedMessage(role=MessageRole.ASSISTANT, content=text),
            finish_reason=FinishReason.STOP,
            usage=UsageStats(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )
    return make


@pytest.fixture
def tool_request():
    """Factory for a response requesting tool calls, given (id, name, args) tuples."""
    def make(*calls: tuple) -> UnifiedResponse:
        return UnifiedResponse(
            message=UnifiedMessage(
                role=MessageRole.ASSISTANT,
                tool_calls=[ToolCall(id=cid, name=name, arguments=args) for cid, name, args in calls],
            ),
            finish_reason=FinishReason.TOOL_USE,
        )
    return make


@pytest.fixture
def sample_messages():
    """Create sample conversation messages."""
    return [
        UnifiedMessage(role=MessageRole.SYSTEM, content="You are a helpful assistant."),
        UnifiedMessage(role=MessageRole.USER, content="Hello!"),
        UnifiedMessage(role=MessageRole.ASSISTANT, content="Hi there!"),
    ]

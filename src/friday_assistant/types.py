"""Unified types for the assistant.

These types provide a provider-agnostic interface for LLM interactions.
All clients convert their provider-specific formats to/from these types,
and the orchestration loop only ever sees these.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable


class MessageRole(Enum):
    """Role of a message in the conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(Enum):
    """Reason why the model stopped generating."""
    STOP = "stop"
    TOOL_USE = "tool_use"
    LENGTH = "length"
    ERROR = "error"


@dataclass
class ToolCall:
    """A tool call requested by the model."""
    id: str
    name: str
    arguments: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass
class UsageStats:
    """Token usage statistics."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class UnifiedMessage:
    """A message in the conversation history.

    This is the canonical message format used throughout the assistant.
    Each LLM client converts to/from this format internally.

    Attributes:
        role: The role of the message sender
        content: Text content of the message (optional for tool calls)
        tool_calls: List of tool calls (only for assistant messages)
        tool_call_id: ID of the tool call this message responds to (only for tool role)
        name: Name of the tool (only for tool role)
    """
    role: MessageRole
    content: str | None = None
    reasoning_content: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary representation."""
        result: dict[str, Any] = {"role": self.role.value}
        if self.content is not None:
            result["content"] = self.content
        if self.reasoning_content is not None:
            result["reasoning_content"] = self.reasoning_content
        if self.tool_calls:
            result["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            result["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            result["name"] = self.name
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UnifiedMessage":
        """Rebuild a message from its ``to_dict`` form."""
        tool_calls = None
        if data.get("tool_calls"):
            tool_calls = [
                ToolCall(id=tc["id"], name=tc["name"], arguments=tc.get("arguments") or {})
                for tc in data["tool_calls"]
            ]
        return cls(
            role=MessageRole(data["role"]),
            content=data.get("content"),
            reasoning_content=data.get("reasoning_content"),
            tool_calls=tool_calls,
            tool_call_id=data.get("tool_call_id"),
            name=data.get("name"),
        )


@dataclass
class UnifiedResponse:
    """Response from an LLM provider.

    Attributes:
        message: The assistant's response message
        finish_reason: Why the model stopped generating
        usage: Token usage statistics (optional)
    """
    message: UnifiedMessage
    finish_reason: FinishReason
    usage: UsageStats | None = None


# ==================== tool types ====================


@dataclass(frozen=True)
class ToolSpec:
    """A registered capability: what the model sees plus how to invoke it.

    Attributes:
        name: Unique tool name used by the model to request it
        description: Text for model consumption
        parameters: JSON schema of the tool arguments
        invoke: Callable receiving validated arguments as keywords
        timeout: Per-tool time budget in seconds (executor default if None)
    """
    name: str
    description: str
    parameters: dict[str, Any]
    invoke: Callable[..., Any] = field(compare=False)
    timeout: float | None = None


class ToolErrorKind(Enum):
    """Structured failure category kept next to a tool result's text."""
    NOT_FOUND = "not_found"
    SCHEMA_VIOLATION = "schema_violation"
    TIMEOUT = "timeout"
    EXECUTION_FAILURE = "execution_failure"


@dataclass
class ToolResult:
    """Outcome of executing one tool call.

    Only ``content`` is shown to the model; ``error`` lets callers and tests
    tell failure kinds apart without matching on text.
    """
    tool_call_id: str
    name: str
    content: str
    error: ToolErrorKind | None = None
    duration: float = 0.0

    @property
    def is_error(self) -> bool:
        return self.error is not None


# ==================== decision / turn types ====================


class DecisionKind(Enum):
    """What the model decided to do on one decision step."""
    ANSWER = auto()
    TOOL_REQUEST = auto()


@dataclass
class Decision:
    """Result of a decision step.

    Attributes:
        kind: ANSWER or TOOL_REQUEST
        message: The assistant message produced by the model
    """
    kind: DecisionKind
    message: UnifiedMessage

    @property
    def text(self) -> str:
        return self.message.content or ""

    @property
    def calls(self) -> list[ToolCall]:
        return list(self.message.tool_calls or [])


class TurnState(Enum):
    """States of the orchestration loop within one turn."""
    AWAITING_DECISION = auto()
    EXECUTING_TOOLS = auto()
    DONE = auto()


class TurnOutcome(Enum):
    """How a turn terminated."""
    ANSWERED = auto()
    MAX_ROUNDS_EXCEEDED = auto()


@dataclass
class TurnResult:
    """Result of one conversation turn.

    Attributes:
        session_id: Session the turn ran against
        outcome: ANSWERED or MAX_ROUNDS_EXCEEDED
        content: Final answer text (or a notice when the round cap was hit)
        rounds: Number of tool-execution rounds performed
        tool_results: Every tool result produced during the turn, in order
    """
    session_id: str
    outcome: TurnOutcome
    content: str
    rounds: int = 0
    tool_results: list[ToolResult] = field(default_factory=list)

    @property
    def is_answered(self) -> bool:
        return self.outcome == TurnOutcome.ANSWERED

    @property
    def max_rounds_exceeded(self) -> bool:
        return self.outcome == TurnOutcome.MAX_ROUNDS_EXCEEDED

"""F.R.I.D.A.Y. - a provider-agnostic conversational desktop assistant.

This package provides a tool-dispatch loop that lets a language model
answer directly or call local and online tools (files, shell, git, web,
calendar, contacts) before answering.
"""

from .agent import Assistant
from .exceptions import (
    AgentError,
    ClientError,
    ModelUnavailableError,
    SecurityError,
    ToolError,
)
from .types import (
    Decision,
    DecisionKind,
    FinishReason,
    MessageRole,
    ToolCall,
    ToolErrorKind,
    ToolResult,
    ToolSpec,
    TurnOutcome,
    TurnResult,
    UnifiedMessage,
    UnifiedResponse,
)

__all__ = [
    # main assistant
    "Assistant",
    # types
    "Decision",
    "DecisionKind",
    "FinishReason",
    "MessageRole",
    "ToolCall",
    "ToolErrorKind",
    "ToolResult",
    "ToolSpec",
    "TurnOutcome",
    "TurnResult",
    "UnifiedMessage",
    "UnifiedResponse",
    # exceptions
    "AgentError",
    "ClientError",
    "ModelUnavailableError",
    "SecurityError",
    "ToolError",
]

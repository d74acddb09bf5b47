"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request to create a session, optionally with a caller-chosen id."""

    session_id: str | None = None


class SessionResponse(BaseModel):
    session_id: str


class RunRequest(BaseModel):
    """Request to run one turn with a user message."""

    message: str = Field(min_length=1)


class ToolResultInfo(BaseModel):
    """One tool call made during a turn."""

    tool_call_id: str
    name: str
    error: str | None = None
    duration: float


class TurnResponse(BaseModel):
    """Response from the assistant for one turn."""

    session_id: str
    outcome: str  # "answered", "max_rounds_exceeded"
    content: str
    rounds: int
    tool_results: list[ToolResultInfo] = []


class HistoryResponse(BaseModel):
    session_id: str
    messages: list[dict[str, Any]]

"""FastAPI server for the assistant.

Every request names its session, so concurrent users are routed to
separate conversations. One Assistant instance serves all sessions; it
serializes turns per session.
"""

from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..agent import Assistant
from ..clients.factory import create_client
from ..config import get_settings
from ..exceptions import ModelUnavailableError, SessionError
from ..logging import get_logger
from ..types import TurnResult
from .schemas import (
    CreateSessionRequest,
    HistoryResponse,
    RunRequest,
    SessionResponse,
    ToolResultInfo,
    TurnResponse,
)

logger = get_logger(__name__)


@lru_cache
def get_assistant() -> Assistant:
    """Build the shared assistant from settings on first use."""
    settings = get_settings()
    provider = settings.detect_provider()
    if not provider:
        raise RuntimeError("No provider specified and none found in environment")

    client = create_client(provider, settings, model=settings.llm_model)
    return Assistant.from_settings(settings, client)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="F.R.I.D.A.Y. API",
        description="API for conversations with the F.R.I.D.A.Y. assistant",
        version="0.1.0",
    )

    # configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


@app.post("/api/sessions", response_model=SessionResponse)
def create_session(
    request: CreateSessionRequest | None = None,
    assistant: Assistant = Depends(get_assistant),
) -> SessionResponse:
    """Create a new session."""
    try:
        session = assistant.store.create(request.session_id if request else None)
    except SessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SessionResponse(session_id=session.id)


@app.delete("/api/sessions/{session_id}")
def delete_session(session_id: str, assistant: Assistant = Depends(get_assistant)) -> dict:
    """Delete a session."""
    try:
        deleted = assistant.delete_session(session_id)
    except SessionError:
        deleted = False
    if deleted:
        return {"status": "deleted"}
    raise HTTPException(status_code=404, detail="Session not found")


@app.post("/api/sessions/{session_id}/turns", response_model=TurnResponse)
def run_turn(
    session_id: str,
    request: RunRequest,
    assistant: Assistant = Depends(get_assistant),
) -> TurnResponse:
    """Run one conversation turn on a session."""
    if session_id not in assistant.store:
        raise HTTPException(status_code=404, detail="Session not found")

    try:
        result = assistant.run_turn(request.message, session_id=session_id)
    except ModelUnavailableError as e:
        logger.warning(f"turn on session {session_id} failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except SessionError:
        raise HTTPException(status_code=404, detail="Session not found")
    return _convert_result(result)


@app.get("/api/sessions/{session_id}/history", response_model=HistoryResponse)
def get_history(session_id: str, assistant: Assistant = Depends(get_assistant)) -> HistoryResponse:
    """Get conversation history for a session."""
    try:
        messages = assistant.history(session_id)
    except SessionError:
        raise HTTPException(status_code=404, detail="Session not found")
    return HistoryResponse(session_id=session_id, messages=[m.to_dict() for m in messages])


def _convert_result(result: TurnResult) -> TurnResponse:
    return TurnResponse(
        session_id=result.session_id,
        outcome=result.outcome.name.lower(),
        content=result.content,
        rounds=result.rounds,
        tool_results=[
            ToolResultInfo(
                tool_call_id=r.tool_call_id,
                name=r.name,
                error=r.error.value if r.error else None,
                duration=r.duration,
            )
            for r in result.tool_results
        ],
    )

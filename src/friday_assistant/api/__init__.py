"""HTTP API for the assistant (requires the ``api`` extra)."""

from .server import app, create_app, get_assistant

__all__ = ["app", "create_app", "get_assistant"]

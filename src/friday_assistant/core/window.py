"""Conversation window management.

The stored history of a session only ever grows; the model sees a bounded
suffix of it. These helpers accept either a ``Session`` or a plain list of
messages.
"""

from typing import Sequence, Union

from ..sessions import Session
from ..types import UnifiedMessage

History = Union[Session, Sequence[UnifiedMessage]]


def _messages(history: History) -> Sequence[UnifiedMessage]:
    return history.messages if isinstance(history, Session) else history


def append(session: Session, message: UnifiedMessage) -> None:
    """Append a message to the session, preserving order."""
    session.add(message)


def windowed(history: History, limit: int) -> list[UnifiedMessage]:
    """Return the last ``limit`` messages, or all of them if there are fewer.

    Args:
        history: Session or message list to window.
        limit: Maximum number of messages to return.

    Returns:
        A new list; the stored history is left untouched.

    Raises:
        ValueError: If ``limit`` is not positive.
    """
    if limit <= 0:
        raise ValueError(f"window limit must be positive, got {limit}")
    messages = _messages(history)
    return list(messages[-limit:])


def last(history: History) -> UnifiedMessage | None:
    """Return the most recent message, or None for an empty history."""
    messages = _messages(history)
    return messages[-1] if messages else None

"""Session state: conversation histories keyed by session id.

A session's history is append-only. Stores hand out copies, so the only way
to change a stored history is ``append``/``append_many``.
"""

import json
import re
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .exceptions import SessionError, SessionNotFoundError
from .logging import get_logger
from .types import UnifiedMessage

logger = get_logger(__name__)

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass
class Session:
    """A conversation: its id and the ordered messages exchanged so far."""

    id: str
    messages: list[UnifiedMessage] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def add(self, message: UnifiedMessage) -> None:
        self.messages.append(message)
        self.updated_at = time.time()

    def copy(self) -> "Session":
        return Session(
            id=self.id,
            messages=list(self.messages),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "messages": [m.to_dict() for m in self.messages],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            id=data["id"],
            messages=[UnifiedMessage.from_dict(m) for m in data.get("messages", [])],
            created_at=data.get("created_at", time.time()),
            updated_at=data.get("updated_at", time.time()),
        )


def new_session_id() -> str:
    return str(uuid.uuid4())


def validate_session_id(session_id: str) -> str:
    """Reject ids that are empty or could escape a storage directory."""
    if not _SESSION_ID_RE.match(session_id or ""):
        raise SessionError(f"Invalid session id: {session_id!r}")
    return session_id


class SessionStore(ABC):
    """Interface of session storage backends."""

    @abstractmethod
    def create(self, session_id: str | None = None) -> Session:
        """Create an empty session.

        Raises:
            SessionError: If a session with that id already exists.
        """

    @abstractmethod
    def get(self, session_id: str) -> Session | None:
        """Return a copy of the session, or None if unknown."""

    @abstractmethod
    def append_many(self, session_id: str, messages: list[UnifiedMessage]) -> None:
        """Append messages to a session in one step.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Ids of all stored sessions."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a session, returning False if it did not exist."""

    def get_or_create(self, session_id: str) -> Session:
        return self.get(session_id) or self.create(session_id)

    def append(self, session_id: str, message: UnifiedMessage) -> None:
        self.append_many(session_id, [message])

    def __contains__(self, session_id: object) -> bool:
        if not isinstance(session_id, str):
            return False
        try:
            return self.get(session_id) is not None
        except SessionError:
            return False


class InMemorySessionStore(SessionStore):
    """Sessions kept in a dict for the lifetime of the process."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, session_id: str | None = None) -> Session:
        session_id = validate_session_id(session_id or new_session_id())
        with self._lock:
            if session_id in self._sessions:
                raise SessionError(f"Session already exists: {session_id}")
            session = Session(id=session_id)
            self._sessions[session_id] = session
            logger.debug(f"created session {session_id}")
            return session.copy()

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.copy() if session else None

    def get_or_create(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(id=validate_session_id(session_id))
                self._sessions[session_id] = session
            return session.copy()

    def append_many(self, session_id: str, messages: list[UnifiedMessage]) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            for message in messages:
                session.add(message)

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None


class JsonFileSessionStore(SessionStore):
    """One JSON file per session in a directory; survives restarts.

    Files are replaced atomically (write to a temp file, then rename), so a
    crash never leaves a half-written history behind.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, session_id: str) -> Path:
        return self.directory / f"{validate_session_id(session_id)}.json"

    def _load(self, session_id: str) -> Session | None:
        path = self._path(session_id)
        if not path.exists():
            return None
        try:
            return Session.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError) as e:
            raise SessionError(f"Corrupt session file {path}: {e}") from e

    def _save(self, session: Session) -> None:
        path = self._path(session.id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(session.to_dict(), indent=2), encoding="utf-8")
        tmp.replace(path)

    def create(self, session_id: str | None = None) -> Session:
        session_id = session_id or new_session_id()
        with self._lock:
            if self._path(session_id).exists():
                raise SessionError(f"Session already exists: {session_id}")
            session = Session(id=session_id)
            self._save(session)
            logger.debug(f"created session {session_id} in {self.directory}")
            return session

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._load(session_id)

    def get_or_create(self, session_id: str) -> Session:
        with self._lock:
            session = self._load(session_id)
            if session is None:
                session = Session(id=session_id)
                self._save(session)
            return session

    def append_many(self, session_id: str, messages: list[UnifiedMessage]) -> None:
        with self._lock:
            session = self._load(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            for message in messages:
                session.add(message)
            self._save(session)

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(p.stem for p in self.directory.glob("*.json"))

    def delete(self, session_id: str) -> bool:
        with self._lock:
            path = self._path(session_id)
            if not path.exists():
                return False
            path.unlink()
            return True


def create_session_store(settings: Settings) -> SessionStore:
    """Build the store selected by the ``session_store`` setting."""
    if settings.session_store == "file":
        return JsonFileSessionStore(settings.session_dir)
    return InMemorySessionStore()

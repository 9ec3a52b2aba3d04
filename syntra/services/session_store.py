"""In-memory session store.

Created once by the app factory and injected wherever sessions are read or
written. Nothing is persisted; the store lives as long as the process.
"""

from __future__ import annotations

from syntra.models.session import Session

from .errors import SessionNotFoundError

class SessionStore:
    """Registry of sessions keyed by id."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def add(self, session: Session) -> Session:
        if session.id in self._sessions:
            raise ValueError(f"Session {session.id} already registered")
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session not found: {session_id}") from None

    def find(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def list(self) -> list[Session]:
        """Return sessions ordered newest first."""

        return sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)

    def count(self) -> int:
        return len(self._sessions)


__all__ = ["SessionStore"]

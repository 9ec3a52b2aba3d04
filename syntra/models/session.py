"""Session record mutated by its processing pipeline and read by handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from syntra.services.response_contract import InsightsResult


class SessionStatus(str, Enum):
    PROCESSING = "processing"
    TRANSCRIBED = "transcribed"
    READY = "ready"
    FAILED = "failed"


def _new_session_id() -> str:
    return f"sess-{uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """One recorded study session.

    ``attempt`` increases with every reprocess request; a pipeline run only
    writes while the session still carries the attempt it was started for.
    """

    audio_location: str
    audio_filename: str = ""
    title: str = "Capture"
    event_id: Optional[str] = None
    id: str = field(default_factory=_new_session_id)
    transcript: str = ""
    insights: Optional[InsightsResult] = None
    status: SessionStatus = SessionStatus.PROCESSING
    progress: int = 0
    error: Optional[str] = None
    error_details: Optional[list[dict[str, Any]]] = None
    attempt: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    processed_at: Optional[datetime] = None

    def reset_for_attempt(self) -> int:
        """Clear run output and start a new attempt on the same audio."""

        self.attempt += 1
        self.status = SessionStatus.PROCESSING
        self.progress = 0
        self.error = None
        self.error_details = None
        self.transcript = ""
        self.insights = None
        self.processed_at = None
        return self.attempt


__all__ = ["Session", "SessionStatus"]

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from syntra.models.session import Session, SessionStatus
from syntra.services.response_contract import InsightsResult


class FlashcardView(BaseModel):
    question: str
    answer: str


class InsightsView(BaseModel):
    """Insights as exposed to clients, including the no-content fallback."""

    summary: str
    keyConcepts: List[str]
    flashcards: List[FlashcardView]
    actionItems: List[str]

    @classmethod
    def from_result(cls, result: InsightsResult) -> "InsightsView":
        return cls.model_validate(result.model_dump(by_alias=True))


class SessionCreatedResponse(BaseModel):
    """Response schema returned as soon as an upload is registered."""

    id: str
    status: SessionStatus
    eventId: Optional[str] = Field(None, description="Calendar event the capture belongs to")
    title: str


class SessionResponse(BaseModel):
    """Full session as shown on the detail screen."""

    id: str
    eventId: Optional[str] = None
    title: str
    audioLocation: str = Field(..., description="Reference to the stored audio artifact")
    audioFilename: str
    transcript: str
    insights: Optional[InsightsView] = None
    status: SessionStatus
    progress: int = Field(..., ge=0, le=100)
    error: Optional[str] = None
    errorDetails: Optional[List[Dict[str, Any]]] = Field(
        None, description="Field-level violations when the model output broke its contract"
    )
    attempt: int
    createdAt: datetime
    processedAt: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            id=session.id,
            eventId=session.event_id,
            title=session.title,
            audioLocation=session.audio_location,
            audioFilename=session.audio_filename,
            transcript=session.transcript,
            insights=InsightsView.from_result(session.insights) if session.insights else None,
            status=session.status,
            progress=session.progress,
            error=session.error,
            errorDetails=session.error_details,
            attempt=session.attempt,
            createdAt=session.created_at,
            processedAt=session.processed_at,
        )


class SessionStatusResponse(BaseModel):
    status: SessionStatus
    progress: int
    error: Optional[str] = None


class SessionCountResponse(BaseModel):
    count: int


class ReprocessResponse(BaseModel):
    id: str
    status: SessionStatus

"""Session processing state machine.

One run moves a session through::

    processing (10) -> transcribed (60) -> ready (100)

Short transcripts skip the insight stage and finish with the fixed fallback
result. Provider, parse and schema failures are not caught here; whoever
started the run records them on the session (see
``syntra.services.session_registry``).

Every write is tagged with the attempt number the run was started for. When
a reprocess request bumps the session's attempt, the older run stops at its
next write instead of overwriting the newer one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List

from syntra.models.session import Session, SessionStatus
from syntra.services.session_store import SessionStore
from syntra.services.storage import LocalUploadStorage
from syntra.services.transcribe import TranscribeService
from syntra.telemetry import time_stage

from .fallback import fallback_insights, is_short_transcript
from .insights import InsightsGenerator

logger = logging.getLogger("syntra.pipelines.session")
transcript_logger = logging.getLogger("syntra.logs.transcript")

PROGRESS_STARTED = 10
PROGRESS_TRANSCRIBED = 60
PROGRESS_DONE = 100


class SupersededRunError(RuntimeError):
    """Raised inside a run whose attempt is no longer the session's current one."""


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the session pipeline."""

    order: int
    name: str
    module: str
    summary: str


@dataclass(frozen=True)
class RunResult:
    session_id: str
    attempt: int
    used_fallback: bool


class SessionPipeline:
    """Drive one session run from stored audio to validated insights."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Transcription",
            "syntra.services.transcribe",
            "Open the stored audio and request a plain-text transcript.",
        ),
        PipelineStage(
            2,
            "Short Transcript Guard",
            "syntra.pipelines.session.fallback",
            "Transcripts under 20 characters get the fixed no-content result.",
        ),
        PipelineStage(
            3,
            "Insight Generation",
            "syntra.pipelines.session.insights",
            "Prompt the chat model and validate its JSON against the insights contract.",
        ),
        PipelineStage(
            4,
            "Completion",
            "syntra.pipelines.session.flow",
            "Store insights and mark the session ready.",
        ),
    ]

    def __init__(
        self,
        store: SessionStore,
        storage: LocalUploadStorage,
        transcriber: TranscribeService,
        insights_generator: InsightsGenerator,
    ) -> None:
        self._store = store
        self._storage = storage
        self._transcriber = transcriber
        self._insights = insights_generator

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    async def process(self, session_id: str, attempt: int) -> RunResult:
        session = self._store.get(session_id)

        self._write(session, attempt, status=SessionStatus.PROCESSING, progress=PROGRESS_STARTED)
        logger.info("Session %s attempt %s: transcription started", session_id, attempt)

        with self._storage.open(session.audio_location) as audio, time_stage("transcription"):
            transcript = await self._transcriber.transcribe(audio)

        self._write(
            session,
            attempt,
            transcript=transcript,
            status=SessionStatus.TRANSCRIBED,
            progress=PROGRESS_TRANSCRIBED,
        )
        transcript_logger.info("session=%s | attempt=%s | text=%s", session_id, attempt, transcript)

        used_fallback = is_short_transcript(transcript)
        if used_fallback:
            logger.warning(
                "Session %s transcript too short (%s chars); skipping insight generation",
                session_id,
                len(transcript.strip()),
            )
            insights = fallback_insights()
        else:
            insights = await self._insights.generate(transcript)

        self._write(
            session,
            attempt,
            insights=insights,
            status=SessionStatus.READY,
            progress=PROGRESS_DONE,
            processed_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Session %s attempt %s processed successfully%s",
            session_id,
            attempt,
            " with empty transcript" if used_fallback else "",
        )
        return RunResult(session_id=session_id, attempt=attempt, used_fallback=used_fallback)

    @staticmethod
    def _write(session: Session, attempt: int, **changes: Any) -> None:
        if session.attempt != attempt:
            raise SupersededRunError(
                f"Session {session.id} attempt {attempt} superseded by {session.attempt}"
            )
        for name, value in changes.items():
            setattr(session, name, value)


__all__ = [
    "PROGRESS_DONE",
    "PROGRESS_STARTED",
    "PROGRESS_TRANSCRIBED",
    "PipelineStage",
    "RunResult",
    "SessionPipeline",
    "SupersededRunError",
]

"""Session registry used by the HTTP layer.

Creating or reprocessing a session spawns the pipeline as a background task
and returns immediately; clients observe progress by polling the session.
The task wrapper here is the only place a failed run is recorded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from syntra.models.session import Session, SessionStatus
from syntra.pipelines.session.flow import SessionPipeline, SupersededRunError
from syntra.telemetry import record_pipeline_run

from .errors import SchemaError
from .session_store import SessionStore

logger = logging.getLogger("syntra.pipelines.session")


class SessionRegistry:
    def __init__(self, store: SessionStore, pipeline: SessionPipeline) -> None:
        self._store = store
        self._pipeline = pipeline
        self._tasks: set[asyncio.Task] = set()

    @property
    def store(self) -> SessionStore:
        return self._store

    def create(
        self,
        audio_location: str,
        *,
        audio_filename: str = "",
        title: Optional[str] = None,
        event_id: Optional[str] = None,
    ) -> Session:
        """Register a new session and start processing it."""

        session = Session(
            audio_location=audio_location,
            audio_filename=audio_filename,
            title=title or "Capture",
            event_id=event_id or None,
        )
        self._store.add(session)
        logger.info("Session %s created for %s", session.id, audio_filename or audio_location)
        self._spawn(session)
        return session

    def get(self, session_id: str) -> Session:
        return self._store.get(session_id)

    def list(self) -> list[Session]:
        return self._store.list()

    def count(self) -> int:
        return self._store.count()

    def reprocess(self, session_id: str) -> Session:
        """Restart processing on the stored audio; older runs stop writing."""

        session = self._store.get(session_id)
        attempt = session.reset_for_attempt()
        logger.info("Session %s reprocess requested (attempt %s)", session_id, attempt)
        self._spawn(session)
        return session

    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every in-flight run to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, session: Session) -> asyncio.Task:
        task = asyncio.create_task(
            self._run(session.id, session.attempt),
            name=f"session-{session.id}-attempt-{session.attempt}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, session_id: str, attempt: int) -> None:
        try:
            result = await self._pipeline.process(session_id, attempt)
        except SupersededRunError as exc:
            logger.info("Discarding stale run: %s", exc)
            record_pipeline_run("superseded")
        except Exception as exc:
            self._mark_failed(session_id, attempt, exc)
        else:
            record_pipeline_run("fallback" if result.used_fallback else "ready")

    def _mark_failed(self, session_id: str, attempt: int, exc: Exception) -> None:
        session = self._store.find(session_id)
        if session is None:
            logger.error("Processing failed for unknown session %s: %s", session_id, exc)
            record_pipeline_run("failed")
            return
        if session.attempt != attempt:
            logger.info(
                "Ignoring failure of superseded run session=%s attempt=%s: %s",
                session_id,
                attempt,
                exc,
            )
            record_pipeline_run("superseded")
            return

        logger.error("Processing failed session=%s attempt=%s: %s", session_id, attempt, exc, exc_info=exc)
        session.status = SessionStatus.FAILED
        session.progress = 0
        session.error = str(exc) or "Unknown error"
        session.error_details = (
            [violation.as_dict() for violation in exc.violations]
            if isinstance(exc, SchemaError)
            else None
        )
        record_pipeline_run("failed")


__all__ = ["SessionRegistry"]

"""Session endpoints.

Uploading audio registers a session and starts its pipeline in the
background (see `syntra.pipelines.session.flow.SessionPipeline`). Clients
poll ``/api/sessions/{id}/status`` until the session is ``ready`` or
``failed``; failures are never reported on the upload response itself.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from syntra.controllers.dependencies import RegistryDep, StorageDep
from syntra.pipelines.session import read_upload_bytes, resolve_content_type
from syntra.services.errors import SessionNotFoundError, StorageError
from syntra.views import (
    ReprocessResponse,
    SessionCountResponse,
    SessionCreatedResponse,
    SessionResponse,
    SessionStatusResponse,
)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

logger = logging.getLogger(__name__)

_AUDIO_UPLOAD = File(None)
_EVENT_ID_FORM = Form(None)
_TITLE_FORM = Form(None)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SessionCreatedResponse)
async def create_session(
    registry: RegistryDep,
    storage: StorageDep,
    audio: Optional[UploadFile] = _AUDIO_UPLOAD,
    eventId: Optional[str] = _EVENT_ID_FORM,
    title: Optional[str] = _TITLE_FORM,
) -> SessionCreatedResponse:
    """Store the recording, register the session and start processing it."""

    if audio is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No audio file received")

    content_type = resolve_content_type(audio)
    audio_bytes = await read_upload_bytes(audio)
    try:
        stored = await storage.save(audio_bytes, audio.filename)
    except StorageError as exc:
        logger.exception("Could not store upload %s", audio.filename)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    session = registry.create(
        stored.location,
        audio_filename=stored.filename,
        title=title,
        event_id=eventId,
    )
    logger.info("Upload stored session=%s content_type=%s bytes=%s", session.id, content_type, len(audio_bytes))
    return SessionCreatedResponse(
        id=session.id,
        status=session.status,
        eventId=session.event_id,
        title=session.title,
    )


@router.get("", response_model=List[SessionResponse])
async def list_sessions(registry: RegistryDep) -> List[SessionResponse]:
    """Return every session, newest first."""

    return [SessionResponse.from_session(session) for session in registry.list()]


@router.get("/count", response_model=SessionCountResponse)
async def count_sessions(registry: RegistryDep) -> SessionCountResponse:
    return SessionCountResponse(count=registry.count())


@router.get("/{session_id}/status", response_model=SessionStatusResponse)
async def session_status(session_id: str, registry: RegistryDep) -> SessionStatusResponse:
    try:
        session = registry.get(session_id)
    except SessionNotFoundError:
        raise _not_found() from None
    return SessionStatusResponse(status=session.status, progress=session.progress, error=session.error)


@router.post("/{session_id}/reprocess", response_model=ReprocessResponse)
async def reprocess_session(session_id: str, registry: RegistryDep) -> ReprocessResponse:
    """Run the pipeline again on the stored audio."""

    try:
        session = registry.reprocess(session_id)
    except SessionNotFoundError:
        raise _not_found() from None
    return ReprocessResponse(id=session.id, status=session.status)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, registry: RegistryDep) -> SessionResponse:
    try:
        session = registry.get(session_id)
    except SessionNotFoundError:
        raise _not_found() from None
    return SessionResponse.from_session(session)

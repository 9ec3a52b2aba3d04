"""Request ingestion helpers for audio and outline uploads."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Final

from fastapi import HTTPException, UploadFile, status

_GENERIC_CONTENT_TYPES: Final[set[str]] = {"", "application/octet-stream"}
_ALLOWED_VIDEO_CONTAINERS: Final[set[str]] = {"video/mp4", "video/webm", "video/mpeg"}


def resolve_content_type(audio_file: UploadFile) -> str:
    """Accept any audio format the transcription provider takes.

    Generic content types are guessed from the filename and otherwise treated
    as MP3.
    """

    content_type = (audio_file.content_type or "").split(";")[0].strip().lower()
    if content_type in _GENERIC_CONTENT_TYPES and audio_file.filename:
        guessed_type, _ = mimetypes.guess_type(audio_file.filename)
        content_type = guessed_type or content_type

    if content_type in _GENERIC_CONTENT_TYPES:
        content_type = "audio/mpeg"

    if not (content_type.startswith("audio/") or content_type in _ALLOWED_VIDEO_CONTAINERS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported audio format",
        )
    return content_type


async def read_upload_bytes(upload: UploadFile, *, kind: str = "audio") -> bytes:
    """Load the upload fully into memory, rejecting empty payloads."""

    data = await upload.read()
    await upload.close()

    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Uploaded {kind} file is empty",
        )
    return data


def upload_extension(upload: UploadFile) -> str:
    return Path(upload.filename or "").suffix.lower()


__all__ = ["read_upload_bytes", "resolve_content_type", "upload_extension"]

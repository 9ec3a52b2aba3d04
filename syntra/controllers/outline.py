"""Course-outline extraction endpoint."""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from syntra.controllers.dependencies import OutlineExtractorDep
from syntra.pipelines.session import OutlineTooShortError, read_upload_bytes, upload_extension
from syntra.services.documents import SUPPORTED_EXTENSIONS, extract_document_text
from syntra.services.errors import ConfigurationError, DocumentError, SyntraError
from syntra.services.response_contract import OutlineResult

router = APIRouter(prefix="/api/outline", tags=["outline"])

logger = logging.getLogger(__name__)

_OUTLINE_UPLOAD = File(None)


@router.post("/extract", response_model=OutlineResult)
async def extract_outline(
    extractor: OutlineExtractorDep,
    file: Optional[UploadFile] = _OUTLINE_UPLOAD,
) -> OutlineResult:
    """Convert a PDF/DOCX syllabus to text and extract highlights, exams and assignments."""

    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No outline file received")

    extension = upload_extension(file)
    if extension not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported outline file type: {extension or 'unknown'}",
        )

    data = await read_upload_bytes(file, kind="outline")
    with tempfile.TemporaryDirectory(prefix="outline-") as tmp_dir:
        tmp_path = Path(tmp_dir) / f"outline{extension}"
        await run_in_threadpool(tmp_path.write_bytes, data)
        try:
            text = await extract_document_text(tmp_path, extension)
        except DocumentError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        return await extractor.extract(text)
    except OutlineTooShortError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except SyntraError as exc:
        logger.error("Outline extract error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Outline extraction failed",
        ) from exc

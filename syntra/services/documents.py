"""Plain-text extraction for uploaded course-outline documents."""

from __future__ import annotations

import logging
from pathlib import Path

import docx
import pdfplumber
from fastapi.concurrency import run_in_threadpool

from .errors import DocumentError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx")


def _extract_pdf_text(path: Path) -> str:
    with pdfplumber.open(path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n\n".join(text for text in pages if text)


def _extract_docx_text(path: Path) -> str:
    document = docx.Document(str(path))
    paragraphs = [para.text.strip() for para in document.paragraphs if para.text.strip()]
    return "\n".join(paragraphs)


def _extract_sync(path: Path, extension: str) -> str:
    if extension == ".pdf":
        return _extract_pdf_text(path)
    return _extract_docx_text(path)


async def extract_document_text(path: str | Path, extension: str) -> str:
    """Return the text content of a PDF or DOCX file."""

    file_path = Path(path)
    ext = (extension or "").lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise DocumentError(f"Unsupported outline file type: {ext or 'unknown'}")
    if not file_path.is_file():
        raise DocumentError(f"Outline file not found: {file_path}")

    try:
        text = await run_in_threadpool(_extract_sync, file_path, ext)
    except Exception as exc:
        logger.warning("Could not read outline document %s: %s", file_path.name, exc)
        raise DocumentError(f"Could not read outline document: {exc}") from exc
    return text or ""


__all__ = ["SUPPORTED_EXTENSIONS", "extract_document_text"]

"""Local disk storage for uploaded audio and outline documents."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool

from .errors import StorageError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredFile:
    """Reference to an upload persisted under the upload directory."""

    location: str
    filename: str

def _safe_name(original: str | None) -> str:
    name = Path(original or "").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"

class LocalUploadStorage:
    """Persist uploads as ``<epoch-millis>-<original name>`` files."""

    def __init__(self, upload_dir: str | Path) -> None:
        self._root = Path(upload_dir).resolve()

    async def save(self, data: bytes, original_name: str | None) -> StoredFile:
        """Write the payload to disk and return its location."""

        if not data:
            raise StorageError("Uploaded file was empty.")

        filename = f"{time.time_ns() // 1_000_000}-{_safe_name(original_name)}"
        target = self._root / filename
        try:
            await run_in_threadpool(self._write, target, data)
        except OSError as exc:
            raise StorageError(f"Failed to store upload: {exc}") from exc
        return StoredFile(location=str(target), filename=filename)

    def _write(self, target: Path, data: bytes) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def open(self, location: str) -> BinaryIO:
        """Open a stored artifact for reading."""

        path = Path(location)
        if not path.is_file():
            raise StorageError(f"Audio file not found: {location}")
        return path.open("rb")


__all__ = ["LocalUploadStorage", "StoredFile"]

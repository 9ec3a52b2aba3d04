"""Error taxonomy shared by the provider adapters and processing pipelines.

Every failure during a session run terminates that run; the registry turns
the exception message into the session's ``error`` field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class SchemaViolation:
    """A single field-level contract violation."""

    path: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


class SyntraError(RuntimeError):
    """Base class for expected service failures."""


class ConfigurationError(SyntraError):
    """Raised when required credentials or settings are missing."""


class ProviderError(SyntraError):
    """Raised when a transcription or chat-completion call fails."""


class ParseError(SyntraError):
    """Raised when model output is not valid JSON after sanitization."""


class SchemaError(SyntraError):
    """Raised when parsed model output does not satisfy its contract."""

    def __init__(self, message: str, violations: Iterable[SchemaViolation] = ()) -> None:
        self.violations: tuple[SchemaViolation, ...] = tuple(violations)
        detail = "; ".join(f"{v.path}: {v.reason}" for v in self.violations[:3])
        super().__init__(f"{message} ({detail})" if detail else message)


class StorageError(SyntraError):
    """Raised when a stored upload cannot be written or read back."""


class DocumentError(SyntraError):
    """Raised when an outline document cannot be converted to text."""


class SessionNotFoundError(SyntraError):
    """Raised when a session id is not present in the registry."""


__all__ = [
    "SchemaViolation",
    "SyntraError",
    "ConfigurationError",
    "ProviderError",
    "ParseError",
    "SchemaError",
    "StorageError",
    "DocumentError",
    "SessionNotFoundError",
]

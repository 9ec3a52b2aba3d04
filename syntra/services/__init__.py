"""Service layer helpers for external integrations and session bookkeeping."""

from .errors import (
    ConfigurationError,
    DocumentError,
    ParseError,
    ProviderError,
    SchemaError,
    SchemaViolation,
    SessionNotFoundError,
    StorageError,
    SyntraError,
)

__all__ = [
    "ConfigurationError",
    "DocumentError",
    "ParseError",
    "ProviderError",
    "SchemaError",
    "SchemaViolation",
    "SessionNotFoundError",
    "StorageError",
    "SyntraError",
]

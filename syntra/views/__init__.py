"""Pydantic schemas used as views in the MVC architecture."""

from .chat import ChatRequest, ChatResponse
from .sessions import (
    FlashcardView,
    InsightsView,
    ReprocessResponse,
    SessionCountResponse,
    SessionCreatedResponse,
    SessionResponse,
    SessionStatusResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "FlashcardView",
    "InsightsView",
    "ReprocessResponse",
    "SessionCountResponse",
    "SessionCreatedResponse",
    "SessionResponse",
    "SessionStatusResponse",
]

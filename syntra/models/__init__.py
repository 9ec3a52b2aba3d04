"""Domain records held by the session registry."""

from .session import Session, SessionStatus

__all__ = ["Session", "SessionStatus"]

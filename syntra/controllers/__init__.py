"""FastAPI routers acting as controllers in the MVC architecture."""

from . import chat, outline, sessions

__all__ = ["chat", "outline", "sessions"]

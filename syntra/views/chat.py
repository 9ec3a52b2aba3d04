from typing import List

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request schema for the study copilot chat."""

    message: str = ""
    sessionIds: List[str] = Field(
        default_factory=list, description="Restrict context to these sessions; empty means all"
    )
    stream: bool = False


class ChatResponse(BaseModel):
    reply: str

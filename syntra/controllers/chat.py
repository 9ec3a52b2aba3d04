"""Study copilot chat endpoint (plain JSON or Server-Sent Events)."""

import logging
from typing import AsyncIterator, Union

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from syntra.controllers.dependencies import CopilotDep, RegistryDep
from syntra.services.errors import ConfigurationError, SyntraError
from syntra.views import ChatRequest, ChatResponse

router = APIRouter(prefix="/api/syntra", tags=["chat"])

logger = logging.getLogger(__name__)


def _sse_event(text: str) -> str:
    """Frame one event; every line of ``text`` gets its own ``data:`` field."""

    return "".join(f"data: {line}\n" for line in text.split("\n")) + "\n"


async def _sse_events(deltas: AsyncIterator[str]) -> AsyncIterator[str]:
    try:
        async for delta in deltas:
            yield _sse_event(delta)
    except SyntraError as exc:
        # Headers are already sent; end the stream after logging.
        logger.error("Syntra chat stream error: %s", exc)
    yield "data: [DONE]\n\n"


@router.post("/chat", response_model=None)
async def chat(
    request: ChatRequest,
    copilot: CopilotDep,
    registry: RegistryDep,
) -> Union[ChatResponse, StreamingResponse]:
    """Answer a study question using the recorded sessions as context."""

    message = request.message.strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    sessions = registry.list()
    try:
        if request.stream:
            deltas = copilot.stream(message, sessions, request.sessionIds)
            return StreamingResponse(
                _sse_events(deltas),
                media_type="text/event-stream",
                headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
            )
        reply = await copilot.reply(message, sessions, request.sessionIds)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except SyntraError as exc:
        logger.error("Syntra chat error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Syntra chat failed",
        ) from exc
    return ChatResponse(reply=reply)

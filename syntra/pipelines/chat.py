"""Study copilot chat grounded in the user's recorded sessions."""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Iterable, Sequence

from syntra.models.session import Session
from syntra.services.llm_client import ChatCompletionClient, ChatMessage

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.3

COPILOT_SYSTEM_PROMPT = """
You are Syntra, a study copilot for students.
Use the provided session summaries, insights, and transcripts first.
If the answer is not in the sessions, say so and then answer briefly from general knowledge.
Be concise, accurate, and avoid speculation.
When referencing sessions, cite the session title or date.
Prefer bullet points for multi-part answers.
""".strip()


def _session_digest(session: Session) -> dict[str, Any]:
    return {
        "id": session.id,
        "title": session.title,
        "status": session.status.value,
        "createdAt": session.created_at.isoformat(),
        "transcript": session.transcript,
        "insights": session.insights.model_dump(by_alias=True) if session.insights else None,
    }


def select_sessions(
    sessions: Iterable[Session],
    session_ids: Sequence[str] | None,
    limit: int,
) -> list[Session]:
    """Keep the requested sessions (all when no ids are given), capped at ``limit``."""

    wanted = set(session_ids or ())
    chosen = [s for s in sessions if not wanted or s.id in wanted]
    return chosen[:limit]


def build_chat_messages(message: str, sessions: Sequence[Session]) -> list[ChatMessage]:
    payload = {
        "message": message,
        "sessions": [_session_digest(session) for session in sessions],
    }
    return [
        {"role": "system", "content": COPILOT_SYSTEM_PROMPT},
        {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
    ]


class StudyCopilot:
    def __init__(self, chat_client: ChatCompletionClient, session_limit: int = 10) -> None:
        self._chat = chat_client
        self._session_limit = session_limit

    def _messages(
        self,
        message: str,
        sessions: Iterable[Session],
        session_ids: Sequence[str] | None,
    ) -> list[ChatMessage]:
        if not message or not message.strip():
            raise ValueError("Message is required")
        selected = select_sessions(sessions, session_ids, self._session_limit)
        logger.info("Copilot chat with %s session(s) in context", len(selected))
        return build_chat_messages(message.strip(), selected)

    async def reply(
        self,
        message: str,
        sessions: Iterable[Session],
        session_ids: Sequence[str] | None = None,
    ) -> str:
        messages = self._messages(message, sessions, session_ids)
        return await self._chat.complete(messages, temperature=CHAT_TEMPERATURE)

    def stream(
        self,
        message: str,
        sessions: Iterable[Session],
        session_ids: Sequence[str] | None = None,
    ) -> AsyncIterator[str]:
        """Validate the request eagerly, then return the delta iterator."""

        messages = self._messages(message, sessions, session_ids)
        self._chat.ensure_configured()
        return self._chat.stream(messages, temperature=CHAT_TEMPERATURE)


__all__ = [
    "CHAT_TEMPERATURE",
    "COPILOT_SYSTEM_PROMPT",
    "StudyCopilot",
    "build_chat_messages",
    "select_sessions",
]

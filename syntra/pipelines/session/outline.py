"""Course-outline extraction: document text in, validated outline out.

Exam and assignment priorities are assigned by the model following the
prompt's rules; they are not recomputed here.
"""

from __future__ import annotations

import logging

from syntra.services.llm_client import ChatCompletionClient
from syntra.services.response_contract import Contract, OutlineResult
from syntra.telemetry import time_stage

from .llm import decode_model_output
from .prompts import build_outline_messages

logger = logging.getLogger("syntra.pipelines.session")

OUTLINE_TEMPERATURE = 0.2
MIN_OUTLINE_CHARS = 20


class OutlineTooShortError(ValueError):
    """Raised when a document holds too little text to be an outline."""


class OutlineExtractor:
    def __init__(self, chat_client: ChatCompletionClient, max_chars: int = 20000) -> None:
        self._chat = chat_client
        self._max_chars = max_chars

    async def extract(self, text: str) -> OutlineResult:
        if not text or len(text.strip()) < MIN_OUTLINE_CHARS:
            raise OutlineTooShortError("Outline text too short")

        if len(text) > self._max_chars:
            logger.info("Truncating outline text from %s to %s chars", len(text), self._max_chars)

        with time_stage("outline"):
            raw = await self._chat.complete(
                build_outline_messages(text, self._max_chars),
                temperature=OUTLINE_TEMPERATURE,
                json_mode=True,
            )
        return decode_model_output(raw, Contract.OUTLINE)


__all__ = [
    "MIN_OUTLINE_CHARS",
    "OUTLINE_TEMPERATURE",
    "OutlineExtractor",
    "OutlineTooShortError",
]

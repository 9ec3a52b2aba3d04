"""Insight generation stage: transcript in, validated study insights out."""

from __future__ import annotations

from syntra.services.llm_client import ChatCompletionClient
from syntra.services.response_contract import Contract, InsightsResult
from syntra.telemetry import time_stage

from .llm import decode_model_output
from .prompts import build_insights_messages

INSIGHTS_TEMPERATURE = 0.3


class InsightsGenerator:
    """Single-shot insight extraction; a malformed reply fails the call."""

    def __init__(self, chat_client: ChatCompletionClient) -> None:
        self._chat = chat_client

    async def generate(self, transcript: str) -> InsightsResult:
        if not transcript or not transcript.strip():
            raise ValueError("Insight generation requires a non-empty transcript")

        with time_stage("insights"):
            raw = await self._chat.complete(
                build_insights_messages(transcript),
                temperature=INSIGHTS_TEMPERATURE,
            )
        return decode_model_output(raw, Contract.INSIGHTS)


__all__ = ["INSIGHTS_TEMPERATURE", "InsightsGenerator"]

"""Shared fakes for the provider adapters."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from syntra.config.settings import Settings, StorageConfig

VALID_INSIGHTS = {
    "summary": "The lecture explained the light and dark reactions of photosynthesis.",
    "keyConcepts": ["Photosynthesis", "Light reactions", "Calvin cycle"],
    "flashcards": [
        {
            "question": "Where do the light reactions happen?",
            "answer": "In the thylakoid membranes.",
        }
    ],
    "actionItems": ["Review the Calvin cycle diagram."],
}

OUTLINE_PAYLOAD = {
    "highlights": [
        {"text": "Final exam worth 40%", "category": "Grading", "reason": "Largest weight"},
    ],
    "exams": [{"text": "Midterm exam", "date": "2026-10-21", "priority": "high"}],
    "assignments": [{"text": "Lab report", "date": None, "priority": None}],
}

LECTURE_TRANSCRIPT = (
    "This lecture covered photosynthesis light and dark reactions in detail over fifty minutes"
)


def fenced(payload: Any, tag: str = "json") -> str:
    return f"```{tag}\n{json.dumps(payload, indent=2)}\n```"


class FakeTranscriber:
    """Stand-in for TranscribeService.

    ``on_call`` runs before the result is returned, which lets tests inspect
    the session mid-run or block a run on an event.
    """

    def __init__(
        self,
        transcript: str = LECTURE_TRANSCRIPT,
        error: Optional[Exception] = None,
        on_call: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.transcript = transcript
        self.error = error
        self.on_call = on_call
        self.calls = 0
        self.payloads: list[bytes] = []

    async def transcribe(self, audio) -> str:
        self.calls += 1
        self.payloads.append(audio.read())
        if self.on_call is not None:
            outcome = self.on_call()
            if asyncio.iscoroutine(outcome):
                await outcome
        if self.error is not None:
            raise self.error
        return self.transcript


class FakeChatClient:
    """Stand-in for ChatCompletionClient returning scripted replies."""

    def __init__(
        self,
        reply: str | None = None,
        error: Optional[Exception] = None,
        deltas: Optional[list[str]] = None,
        on_call: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.reply = json.dumps(VALID_INSIGHTS) if reply is None else reply
        self.error = error
        self.deltas = deltas or ["Hello", " there"]
        self.on_call = on_call
        self.calls: list[dict[str, Any]] = []

    def ensure_configured(self) -> None:
        return None

    async def complete(self, messages, *, temperature, json_mode=False, model=None) -> str:
        self.calls.append(
            {"messages": list(messages), "temperature": temperature, "json_mode": json_mode}
        )
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.reply

    async def stream(self, messages, *, temperature, model=None):
        self.calls.append({"messages": list(messages), "temperature": temperature, "stream": True})
        for delta in self.deltas:
            yield delta


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "lecture.m4a"
    path.write_bytes(b"fake-audio-bytes")
    return path


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(storage=StorageConfig(upload_dir=str(tmp_path / "uploads")))

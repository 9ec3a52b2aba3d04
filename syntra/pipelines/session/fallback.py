"""Fixed insights returned when a recording holds no usable speech."""

from __future__ import annotations

from syntra.services.response_contract import InsightsResult

MIN_TRANSCRIPT_CHARS = 20

FALLBACK_SUMMARY = (
    "The recording did not contain enough audible content to generate insights."
)
FALLBACK_ACTION_ITEMS = (
    "Re-record the session with clearer speech.",
    "Ensure the microphone is close to the speaker.",
    "Avoid long silences during recording.",
)


def is_short_transcript(transcript: str | None) -> bool:
    return len((transcript or "").strip()) < MIN_TRANSCRIPT_CHARS


def fallback_insights() -> InsightsResult:
    """Build the no-content result.

    Empty ``keyConcepts`` is outside the model contract, so the record is
    constructed without validation.
    """

    return InsightsResult.model_construct(
        summary=FALLBACK_SUMMARY,
        keyConcepts=[],
        flashcards=[],
        actionItems=list(FALLBACK_ACTION_ITEMS),
    )


__all__ = [
    "FALLBACK_ACTION_ITEMS",
    "FALLBACK_SUMMARY",
    "MIN_TRANSCRIPT_CHARS",
    "fallback_insights",
    "is_short_transcript",
]

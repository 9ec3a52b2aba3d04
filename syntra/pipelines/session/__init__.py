"""Session processing pipeline package.

Modules follow the order in which a session run executes:

1. `prompts` – fixed system/user prompt pairs.
2. `llm` – sanitize, parse and validate raw model output.
3. `insights` – transcript to validated study insights.
4. `fallback` – short-transcript guard and its fixed result.
5. `flow` – the state machine tying the stages together.

`outline` reuses `prompts` and `llm` for course-outline documents, and
`ingestion` holds the HTTP-aware upload checks used by the controllers.
"""

from .fallback import (
    FALLBACK_ACTION_ITEMS,
    FALLBACK_SUMMARY,
    MIN_TRANSCRIPT_CHARS,
    fallback_insights,
    is_short_transcript,
)
from .flow import PipelineStage, RunResult, SessionPipeline, SupersededRunError
from .ingestion import read_upload_bytes, resolve_content_type, upload_extension
from .insights import InsightsGenerator
from .llm import decode_model_output
from .outline import OutlineExtractor, OutlineTooShortError
from .prompts import build_insights_messages, build_outline_messages

__all__ = [
    "FALLBACK_ACTION_ITEMS",
    "FALLBACK_SUMMARY",
    "MIN_TRANSCRIPT_CHARS",
    "InsightsGenerator",
    "OutlineExtractor",
    "OutlineTooShortError",
    "PipelineStage",
    "RunResult",
    "SessionPipeline",
    "SupersededRunError",
    "build_insights_messages",
    "build_outline_messages",
    "decode_model_output",
    "fallback_insights",
    "read_upload_bytes",
    "resolve_content_type",
    "upload_extension",
    "is_short_transcript",
]

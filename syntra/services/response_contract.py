"""Pydantic models for validating LLM JSON responses.

Both the insights generator and the outline extractor run model output
through ``sanitize_model_output`` and then ``validate_payload`` so that
downstream code receives normalized, type-safe objects. Validation never
raises for malformed input; violations are returned to the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date as calendar_date
from enum import Enum
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SchemaViolation

_CONTRACT_CONFIG = ConfigDict(strict=True)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


class Flashcard(BaseModel):
    question: str = Field(min_length=5)
    answer: str = Field(min_length=5)

    model_config = _CONTRACT_CONFIG


class InsightsResult(BaseModel):
    """Study insights derived from a lecture transcript."""

    summary: str = Field(min_length=20)
    key_concepts: list[str] = Field(alias="keyConcepts", min_length=1, max_length=6)
    flashcards: list[Flashcard] = Field(max_length=5)
    action_items: list[str] = Field(alias="actionItems", min_length=1, max_length=5)

    model_config = _CONTRACT_CONFIG


Priority = Literal["high", "med", "low"]


class OutlineHighlight(BaseModel):
    text: str
    category: str
    reason: str

    model_config = _CONTRACT_CONFIG


class OutlineItem(BaseModel):
    """Exam or assignment mentioned in a course outline."""

    text: str
    date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    priority: Optional[Priority] = None

    model_config = _CONTRACT_CONFIG

    @field_validator("date")
    @classmethod
    def _check_calendar_date(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            calendar_date.fromisoformat(value)
        return value


class OutlineResult(BaseModel):
    """Structured data extracted from a course outline or syllabus."""

    highlights: list[OutlineHighlight]
    exams: list[OutlineItem]
    assignments: list[OutlineItem]

    model_config = _CONTRACT_CONFIG


class Contract(str, Enum):
    INSIGHTS = "insights"
    OUTLINE = "outline"


_CONTRACT_MODELS: dict[Contract, type[BaseModel]] = {
    Contract.INSIGHTS: InsightsResult,
    Contract.OUTLINE: OutlineResult,
}

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationOutcome(Generic[ModelT]):
    """Either a validated model or the violations that prevented it."""

    value: Optional[ModelT] = None
    violations: tuple[SchemaViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.violations


def sanitize_model_output(raw: str | None) -> str:
    """Strip a Markdown code fence wrapped around an otherwise-JSON payload."""

    if not raw:
        return ""

    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned


def _violations_from(exc: ValidationError) -> tuple[SchemaViolation, ...]:
    violations = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        violations.append(SchemaViolation(path=path, reason=error.get("msg", "invalid")))
    return tuple(violations)


def validate_payload(payload: Any, contract: Contract) -> ValidationOutcome[Any]:
    """Validate a parsed JSON object against the named contract."""

    model = _CONTRACT_MODELS[contract]
    try:
        value = model.model_validate(payload)
    except ValidationError as exc:
        return ValidationOutcome(violations=_violations_from(exc))
    return ValidationOutcome(value=value)


def validate_insights(payload: Any) -> ValidationOutcome[InsightsResult]:
    return validate_payload(payload, Contract.INSIGHTS)


def validate_outline(payload: Any) -> ValidationOutcome[OutlineResult]:
    return validate_payload(payload, Contract.OUTLINE)


__all__ = [
    "Contract",
    "Flashcard",
    "InsightsResult",
    "OutlineHighlight",
    "OutlineItem",
    "OutlineResult",
    "Priority",
    "ValidationOutcome",
    "sanitize_model_output",
    "validate_insights",
    "validate_outline",
    "validate_payload",
]

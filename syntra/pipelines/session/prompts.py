"""Prompt construction for the insight and outline stages.

Both prompt pairs are fixed text; only the transcript or outline text is
substituted in.
"""

from __future__ import annotations

from syntra.services.llm_client import ChatMessage

INSIGHTS_SYSTEM_PROMPT = """
You are an academic study assistant for university students.
Extract concise, high-signal learning insights from lecture transcripts.
Be grounded in the transcript and avoid guessing.
You MUST return valid JSON only.
""".strip()

_INSIGHTS_USER_TEMPLATE = """
Analyze the following lecture transcript and extract learning insights.

Transcript:
\"\"\"
{transcript}
\"\"\"

Return a JSON object with exactly this structure:
{{
  "summary": string,
  "keyConcepts": string[],
  "flashcards": [
    {{ "question": string, "answer": string }}
  ],
  "actionItems": string[]
}}

Rules:
- summary: 2-4 sentences, only key takeaways
- keyConcepts: max 5, noun phrases only
- flashcards: max 4, Q/A must be grounded in transcript
- actionItems: 1-3 concrete study tasks tied to content
- Do NOT include text outside JSON
""".strip()

OUTLINE_SYSTEM_PROMPT = """
You are an academic course-outline extractor.
Given a course outline/syllabus, extract only what is explicitly stated.
Return JSON only (no markdown).

Return this exact structure:
{
  "highlights": [{ "text": string, "category": string, "reason": string }],
  "exams": [{ "text": string, "date": "YYYY-MM-DD" | null, "priority": "high" | "med" | "low" | null }],
  "assignments": [{ "text": string, "date": "YYYY-MM-DD" | null, "priority": "high" | "med" | "low" | null }]
}

Rules:
- highlights: 3-6 short phrases (textbook, grading, attendance, policies, prerequisites)
- For each highlight: category (e.g., Grading, Attendance, Materials, Policies, Objectives) and a brief reason.
- exams/assignments: include only if explicitly mentioned as deliverables or tests
- dates: use YYYY-MM-DD when present; null if missing
- priority: high if within 7 days of start term; med within 21 days; low otherwise; null if no date
- do not invent dates or add extra commentary
""".strip()


def build_insights_messages(transcript: str) -> list[ChatMessage]:
    """Return the system/user message pair for insight generation."""

    return [
        {"role": "system", "content": INSIGHTS_SYSTEM_PROMPT},
        {"role": "user", "content": _INSIGHTS_USER_TEMPLATE.format(transcript=transcript)},
    ]


def build_outline_messages(text: str, max_chars: int) -> list[ChatMessage]:
    """Return the outline prompt with the document text truncated to ``max_chars``."""

    return [
        {"role": "system", "content": OUTLINE_SYSTEM_PROMPT},
        {"role": "user", "content": text[:max_chars]},
    ]


__all__ = [
    "INSIGHTS_SYSTEM_PROMPT",
    "OUTLINE_SYSTEM_PROMPT",
    "build_insights_messages",
    "build_outline_messages",
]

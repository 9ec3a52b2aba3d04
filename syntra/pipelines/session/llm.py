"""Decode raw model output into a validated contract model."""

from __future__ import annotations

import json
import logging
from typing import Any

from syntra.services.errors import ParseError, SchemaError
from syntra.services.response_contract import (
    Contract,
    sanitize_model_output,
    validate_payload,
)

logger = logging.getLogger("syntra.pipelines.session")


def truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def decode_model_output(raw: str | None, contract: Contract) -> Any:
    """Sanitize, parse and validate model output; raise on the first failure."""

    logger.info("Raw %s output: %s", contract.value, truncate(raw or ""))

    cleaned = sanitize_model_output(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Model returned invalid %s JSON: %s", contract.value, exc)
        raise ParseError(f"LLM returned invalid JSON for {contract.value}") from exc

    outcome = validate_payload(parsed, contract)
    if not outcome.ok:
        logger.warning(
            "Model %s output failed schema validation: %s",
            contract.value,
            [violation.as_dict() for violation in outcome.violations],
        )
        raise SchemaError(
            f"LLM output failed {contract.value} schema validation",
            outcome.violations,
        )
    return outcome.value


__all__ = ["decode_model_output", "truncate"]

"""Construction of the shared AsyncOpenAI client."""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from syntra.config.settings import OpenAIConfig

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_openai_client(config: OpenAIConfig) -> AsyncOpenAI:
    """Return an AsyncOpenAI client or fail when no API key is configured."""

    api_key = config.api_key.get_secret_value().strip() if config.api_key else ""
    if not api_key:
        raise ConfigurationError("Missing OPENAI_API_KEY")

    logger.debug("Creating OpenAI client base_url=%s", config.base_url or "default")
    return AsyncOpenAI(
        api_key=api_key,
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        max_retries=0,
    )


__all__ = ["create_openai_client"]

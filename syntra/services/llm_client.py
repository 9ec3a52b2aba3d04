"""Thin OpenAI chat-completion wrapper for the insight, outline and chat calls."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Mapping, Optional, Sequence

from syntra.config.settings import OpenAIConfig

from .errors import ProviderError
from .openai_client import create_openai_client

logger = logging.getLogger(__name__)

ChatMessage = Mapping[str, str]


class ChatCompletionClient:
    """Invoke chat-completion models with the configured defaults.

    The underlying SDK client is created lazily so a missing API key only
    surfaces (as ``ConfigurationError``) when a call is actually attempted.
    """

    def __init__(self, config: OpenAIConfig, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def model(self) -> str:
        return self._config.chat_model

    def _resolve_client(self) -> Any:
        if self._client is None:
            self._client = create_openai_client(self._config)
        return self._client

    def ensure_configured(self) -> None:
        """Fail fast with ``ConfigurationError`` before any streaming starts."""

        self._resolve_client()

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        json_mode: bool = False,
        model: Optional[str] = None,
    ) -> str:
        """Run a single non-streaming completion and return the message text."""

        client = self._resolve_client()
        request: dict[str, Any] = {
            "model": model or self.model,
            "messages": [dict(message) for message in messages],
            "temperature": temperature,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**request)
        except Exception as exc:
            raise ProviderError(f"Chat completion failed: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""

    async def stream(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        model: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """Yield non-empty text deltas from a streaming completion."""

        client = self._resolve_client()
        try:
            response = await client.chat.completions.create(
                model=model or self.model,
                messages=[dict(message) for message in messages],
                temperature=temperature,
                stream=True,
            )
            async for chunk in response:
                choices = getattr(chunk, "choices", None) or []
                delta = choices[0].delta.content if choices and choices[0].delta else None
                if delta:
                    yield delta
        except Exception as exc:
            raise ProviderError(f"Chat completion stream failed: {exc}") from exc


__all__ = ["ChatCompletionClient", "ChatMessage"]

"""OpenAI speech-to-text integration."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from syntra.config.settings import OpenAIConfig

from .errors import ProviderError
from .openai_client import create_openai_client

logger = logging.getLogger(__name__)


class TranscribeService:
    """Send one audio stream to the transcription provider and return plain text.

    A single attempt is made per call; retries are left to whoever re-triggers
    the session run.
    """

    def __init__(self, config: OpenAIConfig, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    def _resolve_client(self) -> Any:
        if self._client is None:
            self._client = create_openai_client(self._config)
        return self._client

    async def transcribe(self, audio: BinaryIO) -> str:
        """Transcribe a readable audio stream and return the trimmed text."""

        client = self._resolve_client()
        try:
            result = await client.audio.transcriptions.create(
                file=audio,
                model=self._config.transcription_model,
                response_format="text",
            )
        except Exception as exc:
            logger.error("Transcription request failed: %s", exc)
            raise ProviderError(f"Transcription failed: {exc}") from exc

        # response_format="text" yields a bare string; older SDKs wrap it.
        text = result if isinstance(result, str) else getattr(result, "text", None) or ""
        transcript = str(text).strip()
        logger.info("Transcription complete. Length: %s", len(transcript))
        return transcript


__all__ = ["TranscribeService"]

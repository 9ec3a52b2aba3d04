"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import Settings, settings as default_settings
from .controllers import chat, outline, sessions
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .pipelines.chat import StudyCopilot
from .pipelines.session import InsightsGenerator, OutlineExtractor, SessionPipeline
from .services.llm_client import ChatCompletionClient
from .services.session_registry import SessionRegistry
from .services.session_store import SessionStore
from .services.storage import LocalUploadStorage
from .services.transcribe import TranscribeService

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _rotating_handler(path: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _configure_logging(config: Settings) -> None:
    """Stream logs to stdout and rotate the app, pipeline and transcript files."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(_rotating_handler(config.log_file, 1_000_000, _LOG_FORMAT))
    root_logger.setLevel(logging.DEBUG if config.debug else logging.INFO)

    middleware_logger = logging.getLogger("syntra.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    pipeline_logger = logging.getLogger("syntra.pipelines.session")
    pipeline_logger.handlers.clear()
    pipeline_logger.addHandler(
        _rotating_handler(config.pipeline_log_file, 500_000, "%(asctime)s | %(levelname)s | %(message)s")
    )
    pipeline_logger.setLevel(logging.INFO)

    transcript_logger = logging.getLogger("syntra.logs.transcript")
    transcript_logger.handlers.clear()
    transcript_logger.addHandler(
        _rotating_handler(config.transcript_log_file, 500_000, "%(asctime)s | %(levelname)s | %(message)s")
    )
    transcript_logger.setLevel(logging.INFO)
    transcript_logger.propagate = False

    noisy_loggers = [
        "httpx",
        "httpcore",
        "openai",
        "pdfminer",
        "multipart",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(
    config: Optional[Settings] = None,
    *,
    transcriber: Optional[TranscribeService] = None,
    chat_client: Optional[ChatCompletionClient] = None,
    store: Optional[SessionStore] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Provider adapters and the session store can be passed in; anything left
    out is built from ``config``.
    """

    config = config or default_settings
    if configure_logging:
        _configure_logging(config)

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        debug=config.debug,
        description="Syntra study-session backend API",
    )

    store = store if store is not None else SessionStore()
    storage = LocalUploadStorage(config.storage.upload_dir)
    transcriber = transcriber or TranscribeService(config.openai)
    chat_client = chat_client or ChatCompletionClient(config.openai)
    pipeline = SessionPipeline(store, storage, transcriber, InsightsGenerator(chat_client))
    logger.debug("Session pipeline stages: %s", " -> ".join(stage.name for stage in pipeline.describe()))

    app.state.settings = config
    app.state.storage = storage
    app.state.registry = SessionRegistry(store, pipeline)
    app.state.copilot = StudyCopilot(chat_client, config.pipeline.chat_session_limit)
    app.state.outline_extractor = OutlineExtractor(chat_client, config.pipeline.outline_max_chars)

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    app.include_router(sessions.router)
    app.include_router(chat.router)
    app.include_router(outline.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {config.app_name}",
            "version": config.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": config.app_name,
            "version": config.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        registry: SessionRegistry = app.state.registry
        if registry.pending():
            logger.info("Waiting for %s in-flight session run(s)", registry.pending())
        await registry.drain()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "syntra.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )

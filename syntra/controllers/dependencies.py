"""Common FastAPI dependencies reused across controllers.

Services are built once by the app factory and kept on ``app.state``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from syntra.pipelines.chat import StudyCopilot
from syntra.pipelines.session.outline import OutlineExtractor
from syntra.services.session_registry import SessionRegistry
from syntra.services.storage import LocalUploadStorage


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_storage(request: Request) -> LocalUploadStorage:
    return request.app.state.storage


def get_copilot(request: Request) -> StudyCopilot:
    return request.app.state.copilot


def get_outline_extractor(request: Request) -> OutlineExtractor:
    return request.app.state.outline_extractor


RegistryDep = Annotated[SessionRegistry, Depends(get_registry)]
StorageDep = Annotated[LocalUploadStorage, Depends(get_storage)]
CopilotDep = Annotated[StudyCopilot, Depends(get_copilot)]
OutlineExtractorDep = Annotated[OutlineExtractor, Depends(get_outline_extractor)]


__all__ = [
    "CopilotDep",
    "OutlineExtractorDep",
    "RegistryDep",
    "StorageDep",
    "get_copilot",
    "get_outline_extractor",
    "get_registry",
    "get_storage",
]

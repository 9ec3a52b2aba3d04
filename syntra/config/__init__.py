"""Configuration package."""

from .settings import OpenAIConfig, PipelineConfig, Settings, StorageConfig, settings

__all__ = ["OpenAIConfig", "PipelineConfig", "Settings", "StorageConfig", "settings"]

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAIConfig(BaseSettings):
    """OpenAI transcription and chat-completion configuration."""

    api_key: Optional[SecretStr] = None
    base_url: Optional[str] = None
    transcription_model: str = "whisper-1"
    chat_model: str = "gpt-4.1-mini"
    timeout_seconds: float = Field(default=120.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class StorageConfig(BaseSettings):
    """Local upload storage configuration"""

    upload_dir: str = "uploads"

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """Limits applied by the processing pipelines."""

    outline_max_chars: int = Field(
        default=20000,
        ge=1,
        description="Outline text is truncated to this many characters before prompting.",
    )
    chat_session_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of sessions embedded in a copilot chat prompt.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Syntra Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/session_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # OpenAI
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Storage
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # Pipelines
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()

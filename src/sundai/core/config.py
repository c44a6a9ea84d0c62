"""
Configuration management for the SundAI assistant.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Optional

import os
from pathlib import Path

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Persistence collaborator configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    backend: str = Field(default="memory", description="Persistence backend (memory or mongo)")
    uri: str = Field(default="", description="MongoDB connection URI")
    db_name: str = Field(default="sundai", description="MongoDB database name")
    page_size: int = Field(default=1000, description="Records fetched per collection on refresh")

    @validator("backend")
    def validate_backend(cls, v: str) -> str:
        """Validate persistence backend name."""
        valid_backends = ["memory", "mongo"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Persistence backend must be one of: {valid_backends}")
        return v.lower()

    @validator("uri")
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if v and not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_")

    endpoint: str = Field(default="", description="Azure OpenAI endpoint URL")
    api_key: str = Field(default="", description="Azure OpenAI API key")
    api_version: str = Field(default="2024-12-01-preview", description="Azure OpenAI API version")
    deployment_name: str = Field(default="gpt-4o-mini", description="Azure OpenAI chat deployment name")
    whisper_deployment_name: str = Field(default="whisper", description="Azure OpenAI Whisper deployment name")

    @validator("endpoint")
    def validate_endpoint(cls, v: str) -> str:
        """Validate Azure OpenAI endpoint format."""
        if v and not (v.startswith("https://") and ".openai.azure.com" in v):
            raise ValueError("Invalid Azure OpenAI endpoint format. Must be: https://xxx.openai.azure.com/")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key)


class AssistantSettings(BaseSettings):
    """Conversation router configuration settings."""

    model_config = SettingsConfigDict(env_prefix="ASSISTANT_")

    default_mode: str = Field(default="mcp", description="Assistant mode used when no preference is saved (mcp or rag)")
    preference_file: str = Field(
        default="./storage/assistant_mode.json", description="Where the selected assistant mode is persisted"
    )
    temperature: float = Field(default=0.2, description="Temperature for tool-mode responses")
    max_tokens: int = Field(default=800, description="Maximum tokens for tool-mode responses")

    @validator("default_mode")
    def validate_default_mode(cls, v: str) -> str:
        """Validate assistant mode."""
        if v.lower() not in ["mcp", "rag"]:
            raise ValueError("Assistant mode must be 'mcp' or 'rag'")
        return v.lower()

    @validator("temperature")
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature."""
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v


class RetrievalSettings(BaseSettings):
    """Retrieval (RAG) backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="RAG_")

    base_url: str = Field(default="http://127.0.0.1:8765", description="RAG server base URL")
    request_timeout_seconds: Optional[float] = Field(
        default=None, description="Client timeout for RAG calls (unset means no timeout)"
    )


class AudioSettings(BaseSettings):
    """Voice recording configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AUDIO_")

    temp_dir: str = Field(default="/tmp/sundai_audio", description="Directory for saved recordings")
    min_bytes: int = Field(default=1000, description="Recordings smaller than this are rejected")
    max_size_mb: int = Field(default=25, description="Maximum recording size in MB")

    @validator("max_size_mb")
    def validate_max_size(cls, v: int) -> int:
        """Validate max file size."""
        if v <= 0 or v > 500:
            raise ValueError("Max file size must be between 1 and 500 MB")
        return v


class BackupSettings(BaseSettings):
    """Backup collaborator configuration settings."""

    model_config = SettingsConfigDict(env_prefix="BACKUP_")

    directory: str = Field(default="./storage/backups", description="Directory receiving backup snapshots")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="text", description="Log format (json or text)")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="SundAI", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    azure_openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Override sub-settings with environment variables
        self.database = DatabaseSettings()
        self.azure_openai = AzureOpenAISettings()
        self.assistant = AssistantSettings()
        self.retrieval = RetrievalSettings()
        self.audio = AudioSettings()
        self.backup = BackupSettings()
        self.logging = LoggingSettings()

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps when the working directory isn't the project root and
    pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None

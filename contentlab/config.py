"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CONTENTLAB_",
        extra="ignore",
    )

    # LLM provider
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 1000
    llm_temperature: float = 0.7

    # Outbound call limits
    llm_timeout_seconds: float = 30.0
    llm_max_retries: int = 2
    llm_retry_base_delay: float = 1.0
    llm_breaker_threshold: int = 5
    llm_breaker_reset_seconds: float = 60.0

    # Experiment persistence
    experiment_backend: Literal["memory", "sqlite"] = "memory"
    data_dir: Path = Path("./data")
    db_busy_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "contentlab.db"

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

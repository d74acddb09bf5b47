"""centralized configuration management using pydantic settings.

this module provides type-safe, validated configuration for the assistant.
configuration is loaded from environment variables and optional .env files.
"""

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """main settings class for the assistant.

    configuration is loaded from environment variables. a .env file in the
    working directory is also loaded if present.

    attributes:
        groq_api_key: api key for groq (default provider)
        openai_api_key: api key for openai
        together_api_key: api key for together ai
        anthropic_api_key: api key for anthropic (claude)
        tavily_api_key: api key for tavily web search
        news_api_key: api key for newsapi.org
        google_*: oauth client and tokens for the google calendar tools
        llm_provider: explicit provider selection (auto-detected if not set)
        llm_model: model to use (provider default if not set)
        window_size: number of most recent messages sent to the model
        max_rounds: tool-execution rounds allowed per turn
        tool_timeout: default time budget of a tool call in seconds
        shell_timeout: time budget of shell and git commands in seconds
        session_store: "memory" or "file"
        timezone: iana timezone announced to the model
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # api keys for llm providers
    groq_api_key: str | None = None
    openai_api_key: str | None = None
    together_api_key: str | None = None
    anthropic_api_key: str | None = None

    # tool api keys
    tavily_api_key: str | None = None
    news_api_key: str | None = None

    # google calendar
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_access_token: str | None = None
    google_refresh_token: str | None = None
    calendar_id: str = "primary"

    # llm configuration
    llm_provider: str | None = Field(default=None, alias="LLM_PROVIDER")
    llm_model: str | None = Field(default=None, alias="LLM_MODEL")

    # orchestration
    window_size: int = Field(default=10, ge=1)
    max_rounds: int = Field(default=8, ge=1)
    tool_timeout: float = Field(default=30.0, gt=0)
    shell_timeout: float = Field(default=10.0, gt=0)
    parallel_tools: bool = True

    # sessions
    session_store: Literal["memory", "file"] = "memory"
    session_dir: str = ".friday/sessions"
    session_id: str | None = None

    # tool environment
    timezone: str | None = None
    allowed_paths: list[str] = Field(default_factory=list)
    git_workdir: str | None = None
    contacts_file: str = "contacts.yaml"

    log_level: str = Field(default="WARNING", alias="FRIDAY_LOG_LEVEL")

    def detect_provider(self) -> str | None:
        """auto-detect provider based on available api keys.

        returns:
            provider name or None if no keys are set
        """
        if self.llm_provider:
            return self.llm_provider

        if self.groq_api_key:
            return "groq"
        if self.openai_api_key:
            return "openai"
        if self.anthropic_api_key:
            return "anthropic"
        if self.together_api_key:
            return "together"

        return None

    def get_api_key_for_provider(self, provider: str) -> str | None:
        """get the api key for a specific provider."""
        key_map = {
            "groq": self.groq_api_key,
            "openai": self.openai_api_key,
            "together": self.together_api_key,
            "anthropic": self.anthropic_api_key,
        }
        return key_map.get(provider)

    def resolve_timezone(self) -> str:
        """iana timezone name: explicit setting, then TZ, then UTC."""
        return self.timezone or os.environ.get("TZ") or "UTC"

    def resolve_allowed_paths(self) -> list[str]:
        """roots the filesystem tools may touch; home and temp dir by default."""
        if self.allowed_paths:
            return list(self.allowed_paths)
        return [str(Path.home()), tempfile.gettempdir()]


@lru_cache
def get_settings() -> Settings:
    """get the singleton settings instance.

    call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()

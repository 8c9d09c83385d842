# projectinsight/config.py
from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

# Load .env
load_dotenv(ENV_PATH)


class ServiceConfigs(BaseSettings):
    """External service configuration (LLM endpoint and prompt limits)."""

    # ====================================
    # Model and LLM parameters
    # ====================================
    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = ""
    openai_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.7
    llm_request_timeout: float = 60.0
    # attempts beyond the first; 0 means a single best-effort call
    llm_max_retries: int = 0

    # ====================================
    # Analysis generation
    # ====================================
    analysis_max_tokens: int = 2000
    section_max_tokens: int = 1500
    # user-supplied text is cut to this many tokens before it enters a prompt
    max_prompt_tokens: int = 1500

    app_env: str = "development"
    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH), env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def api_key(self) -> str:
        """LLM_API_KEY, falling back to OPENAI_API_KEY."""
        return (self.llm_api_key or self.openai_api_key or "").strip()


class BaseConfig:
    """Base configuration class for Quart."""

    # ====================
    # Storage Config
    # ====================
    PROJECTS_DIR = Path(
        os.getenv("PROJECTS_DIR", str(BASE_DIR / "data" / "projects"))
    ).resolve()
    # seconds to wait for in-flight generations when the server stops
    BACKGROUND_DRAIN_TIMEOUT = float(os.getenv("BACKGROUND_DRAIN_TIMEOUT", "30"))

    # ====================
    # App Config
    # ====================
    ENV = os.getenv("APP_ENV", "development")
    DEBUG = False
    TESTING = False

    # ====================
    # Logger Config
    # ====================
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_MODE = os.getenv("LOG_MODE", "file")  # file | stdout
    LOG_RETENTION = int(os.getenv("LOG_RETENTION", 90))
    LOG_CONSOLE = os.getenv("LOG_CONSOLE", "true").lower() == "true"


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    ENV = "testing"
    LOG_MODE = "stdout"
    BACKGROUND_DRAIN_TIMEOUT = 5.0


class ProductionConfig(BaseConfig):
    DEBUG = False
    ENV = "production"


config_map = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[BaseConfig]:
    """Return the configuration class corresponding to the given environment."""
    if not env:
        env = os.getenv("APP_ENV", "default")
    return config_map.get(env, config_map["default"])

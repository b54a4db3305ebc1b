"""Settings, logging and model factories shared by the CLI and the agents."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.settings import ModelSettings
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("sentence_breaker")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(Exception):
    """Raised when required configuration is missing at startup."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    gemini_api_key: str = ""

    # Step 1 favours natural phrasing, step 2 favours consistent analysis
    translation_model: str = "gemini-2.5-flash-lite"
    analysis_model: str = "gemini-2.5-flash"
    translation_temperature: float = Field(0.3, ge=0.0, le=2.0)
    analysis_temperature: float = Field(0.0, ge=0.0, le=2.0)

    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def require_api_key(settings: Settings | None = None) -> str:
    """Return the Gemini API key or raise ConfigError with setup instructions."""
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        raise ConfigError(
            "GEMINI_API_KEY environment variable is not set\n"
            "Please set it with: export GEMINI_API_KEY=your_api_key"
        )
    return settings.gemini_api_key


def get_model(model_name: str) -> GoogleModel:
    """Gemini model bound to the configured API key."""
    provider = GoogleProvider(api_key=require_api_key())
    return GoogleModel(model_name, provider=provider)


def get_model_settings(temperature: float) -> ModelSettings:
    return ModelSettings(temperature=temperature)


def setup_logging(level: str | None = None, log_file: Path | None = None) -> None:
    """Configure root logging. Defaults to stderr at the configured level."""
    level = (level or get_settings().log_level).upper()
    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    # Third-party HTTP clients are chatty at debug level
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

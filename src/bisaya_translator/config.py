"""Application configuration using Pydantic settings."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gemini-2.5-flash"
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
LOG_DATEFMT = '%H:%M:%S'


class ConfigurationError(Exception):
    """Raised when a required setting (e.g. the API key) is missing."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_api_key", "api_key"),
    )
    extraction_model: str = DEFAULT_MODEL
    translation_model: str = DEFAULT_MODEL

    # Local key-value storage for the custom translation list, relative to the working directory
    storage_path: Path = Path("data") / "local_storage.json"

    # Logging
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        """Return the API key or raise if none is configured."""
        if not self.gemini_api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY (or GOOGLE_API_KEY / API_KEY) not found in environment"
            )
        return self.gemini_api_key


@lru_cache()
def get_settings() -> Settings:
    """Load .env from the working directory and return the cached settings."""
    load_dotenv(Path.cwd() / '.env')
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for an entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

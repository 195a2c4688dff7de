"""
Application configuration.

Settings are read from environment variables prefixed with IMAGEKIT_, nested
sections separated by a double underscore, e.g.:

    IMAGEKIT_SYSTEM__LOG_LEVEL=DEBUG
    IMAGEKIT_IMAGE__STORAGE_PATH=/srv/images
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import APIConstants, TransportConstants


class SystemSettings(BaseModel):
    """Logging and debug settings"""

    log_level: str = "INFO"
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return value


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = APIConstants.DEFAULT_HOST
    port: int = Field(APIConstants.DEFAULT_PORT, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = ["*"]


class ImageSettings(BaseModel):
    """Image storage and transport settings"""

    storage_path: Path = Path(APIConstants.DEFAULT_STORAGE_PATH)
    stream_chunk_size: int = Field(TransportConstants.DEFAULT_CHUNK_SIZE, ge=1024)


class Settings(BaseSettings):
    """Root settings object"""

    model_config = SettingsConfigDict(
        env_prefix="IMAGEKIT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    system: SystemSettings = SystemSettings()
    api: APISettings = APISettings()
    image: ImageSettings = ImageSettings()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

"""
dif_check configuration
"""
import logging
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """dif_check settings, read from ``DIF_CHECK_*`` environment variables"""

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "%(levelname)s %(name)s: %(message)s"

    # Terminal output: auto | always | never
    COLOR: str = "auto"

    # Autodetection
    MAPPING_EXTENSIONS: List[str] = [".txt"]

    model_config = SettingsConfigDict(
        env_prefix="DIF_CHECK_",
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level


settings = Settings()

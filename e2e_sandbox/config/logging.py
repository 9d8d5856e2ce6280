"""Logging configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """Log level and renderer selection."""

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    class Config:
        env_prefix = "E2E_SANDBOX_"
        extra = "ignore"

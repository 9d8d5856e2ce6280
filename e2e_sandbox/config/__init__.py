"""Configuration management for the e2e sandbox harness.

A flat Settings class read from ``E2E_SANDBOX_*`` environment variables,
with grouped views for the sandbox and logging concerns.

Usage:
    from e2e_sandbox.config import settings

    settings.retry_attempts
    settings.sandbox.filesystem_settle_delay
    settings.logging.log_format
"""

import signal
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingConfig
from .sandbox import (
    DEFAULT_FILESYSTEM_SETTLE_DELAY,
    DEFAULT_PACKAGE_ARTIFACT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    SandboxConfig,
)


class Settings(BaseSettings):
    """Harness settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="E2E_SANDBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # Temp directories
    sandbox_prefix: str = Field(
        default="e2e-sandbox-",
        description="Prefix of every sandbox temp directory",
    )
    cache_prefix: str = Field(
        default="e2e-sandbox-cache-",
        description="Prefix of the shared package-manager cache directory",
    )
    cache_dir: Optional[str] = Field(
        default=None,
        description="Existing cache directory to reuse instead of a fresh temp one",
    )

    # Timing
    filesystem_settle_delay: float = Field(
        default=DEFAULT_FILESYSTEM_SETTLE_DELAY,
        ge=0,
        description="Seconds to wait for filesystem events to propagate",
    )
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)

    # Process teardown
    kill_signal: str = Field(default="SIGKILL")
    kill_wait_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a killed process to be reaped",
    )

    # Package artifact precondition
    require_package_artifact: bool = Field(default=True)
    package_artifact: str = Field(default=DEFAULT_PACKAGE_ARTIFACT)
    project_root: Optional[str] = Field(default=None)

    @field_validator("kill_signal")
    @classmethod
    def validate_kill_signal(cls, v):
        name = v.strip().upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        if name not in signal.Signals.__members__:
            raise ValueError(f"Unknown signal: {v}")
        return name

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        fmt = v.strip().lower()
        if fmt not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return fmt

    @property
    def sandbox(self) -> SandboxConfig:
        """Access sandbox configuration group."""
        return SandboxConfig(
            sandbox_prefix=self.sandbox_prefix,
            cache_prefix=self.cache_prefix,
            cache_dir=self.cache_dir,
            filesystem_settle_delay=self.filesystem_settle_delay,
            retry_attempts=self.retry_attempts,
            retry_delay=self.retry_delay,
            kill_signal=self.kill_signal,
            kill_wait_timeout=self.kill_wait_timeout,
            require_package_artifact=self.require_package_artifact,
            package_artifact=self.package_artifact,
            project_root=self.project_root,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(log_level=self.log_level, log_format=self.log_format)

    def get_kill_signal(self) -> signal.Signals:
        return signal.Signals[self.kill_signal]

    def get_package_artifact_path(self) -> Path:
        """Resolve the package artifact against the project root."""
        artifact = Path(self.package_artifact)
        if artifact.is_absolute():
            return artifact
        root = Path(self.project_root) if self.project_root else Path.cwd()
        return (root / artifact).resolve()


# Global settings instance
settings = Settings()


__all__ = [
    "Settings",
    "settings",
    "LoggingConfig",
    "SandboxConfig",
    "DEFAULT_FILESYSTEM_SETTLE_DELAY",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY",
]

"""Sandbox lifecycle configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

# Pause after filesystem mutations so change notifications reach watchers
# running inside the sandbox before the caller moves on.
DEFAULT_FILESYSTEM_SETTLE_DELAY = 0.25

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 0.25

DEFAULT_PACKAGE_ARTIFACT = "package-0.0.0-semantic-release.tgz"


class SandboxConfig(BaseSettings):
    """Temp directory, retry and process teardown settings."""

    sandbox_prefix: str = Field(default="e2e-sandbox-")
    cache_prefix: str = Field(default="e2e-sandbox-cache-")
    cache_dir: Optional[str] = Field(default=None)
    filesystem_settle_delay: float = Field(default=DEFAULT_FILESYSTEM_SETTLE_DELAY, ge=0)
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)
    kill_signal: str = Field(default="SIGKILL")
    kill_wait_timeout: float = Field(default=5.0, gt=0)
    require_package_artifact: bool = Field(default=True)
    package_artifact: str = Field(default=DEFAULT_PACKAGE_ARTIFACT)
    project_root: Optional[str] = Field(default=None)

    class Config:
        env_prefix = "E2E_SANDBOX_"
        extra = "ignore"

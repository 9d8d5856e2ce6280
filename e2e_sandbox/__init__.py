"""Disposable sandboxes for end-to-end build-tool scenarios."""

from .models import (
    CommandFailedError,
    Fixture,
    KillResult,
    PackageArtifactMissingError,
    PatternNotFoundError,
    SandboxClosedError,
    SandboxEnvironmentError,
    SandboxException,
    SandboxPathError,
)
from .services.sandbox import (
    Sandbox,
    create_sandbox,
    ensure_package_artifact,
    npm_installer,
    yarn_installer,
)
from .utils.retry import retry

__version__ = "0.1.0"

__all__ = [
    "Sandbox",
    "create_sandbox",
    "ensure_package_artifact",
    "npm_installer",
    "yarn_installer",
    "retry",
    "Fixture",
    "KillResult",
    "SandboxException",
    "SandboxEnvironmentError",
    "PackageArtifactMissingError",
    "SandboxPathError",
    "PatternNotFoundError",
    "CommandFailedError",
    "SandboxClosedError",
]

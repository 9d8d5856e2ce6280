"""Data models for the sandbox harness."""

from .errors import (
    ErrorType,
    SandboxException,
    SandboxEnvironmentError,
    PackageArtifactMissingError,
    SandboxPathError,
    PatternNotFoundError,
    CommandFailedError,
    SandboxClosedError,
)
from .fixture import Fixture, flatten_fixtures
from .process import KillResult

__all__ = [
    # Errors
    "ErrorType",
    "SandboxException",
    "SandboxEnvironmentError",
    "PackageArtifactMissingError",
    "SandboxPathError",
    "PatternNotFoundError",
    "CommandFailedError",
    "SandboxClosedError",
    # Fixtures
    "Fixture",
    "flatten_fixtures",
    # Processes
    "KillResult",
]

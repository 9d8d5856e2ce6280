"""Error types and exception classes for the sandbox harness."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    ENVIRONMENT = "environment"
    PRECONDITION = "precondition"
    INVALID_PATH = "invalid_path"
    PATTERN_NOT_FOUND = "pattern_not_found"
    COMMAND_FAILED = "command_failed"
    SANDBOX_CLOSED = "sandbox_closed"


class SandboxException(Exception):
    """Base exception for sandbox harness failures."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.ENVIRONMENT,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a plain dict for reporting."""
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            "details": dict(self.details),
        }


class SandboxEnvironmentError(SandboxException):
    """The temp directory facility failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type=ErrorType.ENVIRONMENT, **kwargs)


class PackageArtifactMissingError(SandboxException):
    """The distributable package has not been built yet."""

    def __init__(self, artifact_path: str, pack_command: str = "npm pack"):
        super().__init__(
            message=(
                f"Cannot find {artifact_path} file. To run e2e tests, "
                f'execute "{pack_command}" command before.'
            ),
            error_type=ErrorType.PRECONDITION,
            details={"artifact_path": artifact_path},
        )
        self.artifact_path = artifact_path


class SandboxPathError(SandboxException, ValueError):
    """A path does not stay inside the sandbox directory."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Path {path!r} must be relative to the sandbox directory",
            error_type=ErrorType.INVALID_PATH,
            details={"path": path},
        )
        self.path = path


class PatternNotFoundError(SandboxException):
    """The patch search string is not present in the file."""

    def __init__(self, path: str, search: str, content: str):
        super().__init__(
            message=f'Cannot find "{search}" in the {path}. The file content:\n{content}.',
            error_type=ErrorType.PATTERN_NOT_FOUND,
            details={"path": path, "search": search},
        )
        self.path = path
        self.search = search
        self.content = content


class CommandFailedError(SandboxException):
    """A command exited with a non-zero status.

    ``str(error)`` and ``error.output`` are the combined stdout and stderr,
    exactly as a successful ``exec`` would have returned them.
    """

    def __init__(self, command: str, returncode: Optional[int], output: str):
        super().__init__(
            message=output,
            error_type=ErrorType.COMMAND_FAILED,
            details={"command": command, "returncode": returncode},
        )
        self.command = command
        self.returncode = returncode
        self.output = output


class SandboxClosedError(SandboxException):
    """The sandbox was already cleaned up."""

    def __init__(self, context: str):
        super().__init__(
            message=f"Sandbox {context} was cleaned up and cannot be reused",
            error_type=ErrorType.SANDBOX_CLOSED,
            details={"context": context},
        )

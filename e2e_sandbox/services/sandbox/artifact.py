"""Precondition check for the packed distributable under test."""

from pathlib import Path

import structlog

from ...config import settings
from ...models.errors import PackageArtifactMissingError

logger = structlog.get_logger(__name__)


def get_package_artifact_path() -> Path:
    """Absolute path of the package artifact installed into sandboxes."""
    return settings.get_package_artifact_path()


def ensure_package_artifact() -> Path:
    """Fail fast when the package artifact has not been built.

    Returns:
        The artifact path

    Raises:
        PackageArtifactMissingError: the artifact does not exist
    """
    artifact = get_package_artifact_path()
    if not settings.require_package_artifact:
        return artifact

    if not artifact.is_file():
        logger.error("Package artifact missing", artifact=str(artifact))
        raise PackageArtifactMissingError(str(artifact))

    return artifact

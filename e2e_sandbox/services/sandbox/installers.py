"""Default dependency installers for loaded sandboxes.

Both installers share one cache directory per process so repeated installs
across sandboxes avoid network fetches.
"""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import structlog

from ...config import settings
from ...utils.retry import retry

if TYPE_CHECKING:
    from .sandbox import Sandbox

logger = structlog.get_logger(__name__)

Installer = Callable[["Sandbox"], Awaitable[Any]]


@lru_cache(maxsize=None)
def get_cache_dir() -> Path:
    """Shared package-manager cache directory, created once per process."""
    if settings.cache_dir:
        cache_dir = Path(settings.cache_dir)
        cache_dir.mkdir(parents=True, exist_ok=True)
    else:
        cache_dir = Path(tempfile.mkdtemp(prefix=settings.cache_prefix))
    logger.info("Package cache directory", cache_dir=str(cache_dir))
    return cache_dir


def get_npm_cache_dir() -> Path:
    return get_cache_dir() / "npm"


def get_yarn_cache_dir() -> Path:
    return get_cache_dir() / "yarn"


async def npm_installer(sandbox: "Sandbox") -> None:
    """Run ``npm install`` in the sandbox."""
    await retry(
        lambda: sandbox.exec(
            "npm install", {"npm_config_cache": str(get_npm_cache_dir())}
        )
    )


async def yarn_installer(sandbox: "Sandbox") -> None:
    """Run ``yarn install`` in the sandbox."""
    await retry(
        lambda: sandbox.exec(
            "yarn install", {"YARN_CACHE_FOLDER": str(get_yarn_cache_dir())}
        )
    )

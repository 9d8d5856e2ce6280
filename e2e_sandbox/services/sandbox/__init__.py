"""Disposable sandbox services.

This package provides the sandbox used by end-to-end scenarios:
- sandbox.py: Sandbox lifecycle plus file and process primitives
- executor.py: Process launching and process-tree teardown
- installers.py: Default npm/yarn installers with a shared cache
- artifact.py: Package artifact precondition check
"""

from .sandbox import Sandbox, create_sandbox, normalize_eol
from .executor import SandboxExecutor
from .installers import npm_installer, yarn_installer, get_npm_cache_dir, get_yarn_cache_dir
from .artifact import ensure_package_artifact, get_package_artifact_path

__all__ = [
    "Sandbox",
    "create_sandbox",
    "normalize_eol",
    "SandboxExecutor",
    "npm_installer",
    "yarn_installer",
    "get_npm_cache_dir",
    "get_yarn_cache_dir",
    "ensure_package_artifact",
    "get_package_artifact_path",
]

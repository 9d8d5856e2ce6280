"""Pytest configuration and shared fixtures."""

import os

# Set test environment before importing config
# Use setdefault to allow environment variables to override defaults
os.environ.setdefault("E2E_SANDBOX_FILESYSTEM_SETTLE_DELAY", "0")
os.environ.setdefault("E2E_SANDBOX_RETRY_DELAY", "0")
os.environ.setdefault("E2E_SANDBOX_REQUIRE_PACKAGE_ARTIFACT", "false")
os.environ.setdefault("E2E_SANDBOX_LOG_LEVEL", "DEBUG")

import pytest
import pytest_asyncio

from e2e_sandbox.config import settings
from e2e_sandbox.services.sandbox import Sandbox
from e2e_sandbox.testing import sandbox  # noqa: F401
from e2e_sandbox.utils.logging import setup_logging

setup_logging()


async def noop_installer(sandbox):
    """Installer that installs nothing."""
    return None


@pytest.fixture
def no_install():
    return noop_installer


@pytest_asyncio.fixture
async def bare_sandbox():
    """Sandbox constructed directly, cleaned up after the test."""
    instance = Sandbox()
    try:
        yield instance
    finally:
        await instance.cleanup()


@pytest.fixture
def fast_settings(monkeypatch):
    """Zero delays regardless of the environment."""
    monkeypatch.setattr(settings, "filesystem_settle_delay", 0)
    monkeypatch.setattr(settings, "retry_delay", 0)
    monkeypatch.setattr(settings, "retry_attempts", 3)
    return settings

"""Unit tests for the default installers."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from e2e_sandbox.config import settings
from e2e_sandbox.models.errors import CommandFailedError
from e2e_sandbox.services.sandbox.installers import (
    get_cache_dir,
    get_npm_cache_dir,
    get_yarn_cache_dir,
    npm_installer,
    yarn_installer,
)


@pytest.fixture
def cache_dir(monkeypatch, tmp_path):
    """Point the shared cache at a temp dir for the duration of a test."""
    monkeypatch.setattr(settings, "cache_dir", str(tmp_path / "cache"))
    get_cache_dir.cache_clear()
    yield tmp_path / "cache"
    get_cache_dir.cache_clear()


def mock_sandbox(side_effect=None):
    sandbox = MagicMock()
    sandbox.exec = AsyncMock(return_value="installed", side_effect=side_effect)
    return sandbox


class TestCacheDirs:
    """Test the shared cache location."""

    def test_configured_cache_dir(self, cache_dir):
        assert get_cache_dir() == cache_dir
        assert cache_dir.is_dir()
        assert get_npm_cache_dir() == cache_dir / "npm"
        assert get_yarn_cache_dir() == cache_dir / "yarn"

    def test_shared_across_calls(self, monkeypatch):
        monkeypatch.setattr(settings, "cache_dir", None)
        get_cache_dir.cache_clear()
        try:
            first = get_cache_dir()
            assert get_cache_dir() == first
            assert first.name.startswith(settings.cache_prefix)
        finally:
            get_cache_dir.cache_clear()


class TestInstallers:
    """Test installer commands and retries."""

    @pytest.mark.asyncio
    async def test_npm_installer(self, cache_dir, fast_settings):
        sandbox = mock_sandbox()

        await npm_installer(sandbox)

        sandbox.exec.assert_awaited_once_with(
            "npm install", {"npm_config_cache": str(cache_dir / "npm")}
        )

    @pytest.mark.asyncio
    async def test_yarn_installer(self, cache_dir, fast_settings):
        sandbox = mock_sandbox()

        await yarn_installer(sandbox)

        sandbox.exec.assert_awaited_once_with(
            "yarn install", {"YARN_CACHE_FOLDER": str(cache_dir / "yarn")}
        )

    @pytest.mark.asyncio
    async def test_installer_retries_failed_install(self, cache_dir, fast_settings):
        """Test a flaky install is retried as a whole step."""
        failure = CommandFailedError("npm install", 1, "ECONNRESET")
        sandbox = mock_sandbox(side_effect=[failure, "installed"])

        await npm_installer(sandbox)

        assert sandbox.exec.await_count == 2

    @pytest.mark.asyncio
    async def test_installer_gives_up(self, cache_dir, fast_settings):
        failure = CommandFailedError("yarn install", 1, "error")
        sandbox = mock_sandbox(side_effect=failure)

        with pytest.raises(CommandFailedError):
            await yarn_installer(sandbox)

        assert sandbox.exec.await_count == settings.retry_attempts

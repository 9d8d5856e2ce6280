"""Opt-in pytest plugin providing a sandbox per test.

Enable it from a conftest.py:

    pytest_plugins = ["e2e_sandbox.testing"]
"""

from typing import AsyncGenerator

import pytest_asyncio

from .services.sandbox import Sandbox, create_sandbox


@pytest_asyncio.fixture
async def sandbox() -> AsyncGenerator[Sandbox, None]:
    """A fresh sandbox, always cleaned up after the test."""
    instance = await create_sandbox()
    try:
        yield instance
    finally:
        await instance.cleanup()

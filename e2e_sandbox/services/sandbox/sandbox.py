"""Disposable sandbox directory for end-to-end scenarios.

A Sandbox owns one temp directory, the files it created there and the
processes it started there, so that ``reset`` can revert to the post-load
state and ``cleanup`` can destroy everything without leaving processes
behind.
"""

import asyncio
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Set, Tuple, Union

import structlog

from ...config import settings
from ...models.errors import (
    CommandFailedError,
    PatternNotFoundError,
    SandboxClosedError,
    SandboxEnvironmentError,
    SandboxPathError,
)
from ...models.fixture import Fixture, flatten_fixtures
from ...models.process import KillResult
from ...utils.retry import retry
from .artifact import ensure_package_artifact
from .executor import SandboxExecutor, signal_process_tree
from .installers import Installer, npm_installer

logger = structlog.get_logger(__name__)

EOL_RE = re.compile(r"\r\n?")


def normalize_eol(content: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return EOL_RE.sub("\n", content)


async def settle() -> None:
    """Wait for filesystem events to propagate."""
    await asyncio.sleep(settings.filesystem_settle_delay)


def _write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return normalize_eol(f.read())


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


class Sandbox:
    """Temp directory with tracked files and processes.

    Operations are meant to be awaited one at a time by a single caller.
    Overwrites of files that existed before ``write`` are not reverted by
    ``reset``, and neither is anything the installer produced.
    """

    def __init__(self):
        """Allocate a fresh, uniquely named sandbox directory."""
        try:
            context = tempfile.mkdtemp(prefix=settings.sandbox_prefix)
        except OSError as e:
            logger.error("Failed to create sandbox directory", error=str(e))
            raise SandboxEnvironmentError(
                f"Failed to create sandbox directory: {e}"
            ) from e

        self._context = Path(context).resolve()
        self._executor = SandboxExecutor(self._context)
        # Ordered set of relative paths created since the last load/reset
        self._created_files: Dict[str, None] = {}
        self._processes: Set[asyncio.subprocess.Process] = set()
        # Output forwarding tasks of spawned processes
        self._watchers: Dict[asyncio.subprocess.Process, asyncio.Task] = {}
        self._closed = False

        logger.info("Sandbox directory", context=str(self._context))

    @property
    def context(self) -> Path:
        return self._context

    @property
    def created_files(self) -> Tuple[str, ...]:
        return tuple(self._created_files)

    @property
    def tracked_processes(self) -> FrozenSet[asyncio.subprocess.Process]:
        return frozenset(self._processes)

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "Sandbox":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(
        self,
        fixtures: Union[Fixture, Sequence[Fixture]],
        installer: Optional[Installer] = None,
    ) -> None:
        """Write fixtures, install dependencies and take the result as baseline.

        Args:
            fixtures: One fixture or an ordered sequence of fixtures
            installer: Coroutine function receiving the sandbox (npm by default)
        """
        self._ensure_open()
        if installer is None:
            installer = npm_installer

        for path, content in flatten_fixtures(fixtures):
            await self.write(path, content)
        logger.info("Fixtures initialized", context=str(self._context))

        logger.info("Installing dependencies...")
        await installer(self)
        logger.info("The sandbox initialized successfully")

        # Installer output (lock files, dependency dirs) is part of the baseline
        self._created_files.clear()

        await settle()

    async def reset(self) -> None:
        """Stop processes and remove files created since the last load."""
        self._ensure_open()
        logger.info("Resetting the sandbox...")

        await self._kill_spawned_processes()
        await self._remove_created_files()

        logger.info("Sandbox reset")

    async def cleanup(self) -> None:
        """Stop processes and delete the sandbox directory.

        The sandbox cannot be used afterwards. Calling cleanup again is a no-op.
        """
        if self._closed:
            return

        logger.info("Cleaning up the sandbox...")
        await self._kill_spawned_processes()

        logger.info("Removing sandbox directory", context=str(self._context))
        await retry(lambda: asyncio.to_thread(_remove_path, self._context))
        self._closed = True

        logger.info("Sandbox cleaned up")

    async def _kill_spawned_processes(self) -> None:
        for process in list(self._processes):
            await self.kill(process)

        await settle()

    async def _remove_created_files(self) -> None:
        paths = list(self._created_files)
        await asyncio.gather(*(self.remove(path) for path in paths))
        self._created_files.clear()

        await settle()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def write(self, path: str, content: str) -> None:
        """Write a text file, creating parent directories as needed."""
        logger.debug("Writing file", path=path)
        real_path = self._resolve(path)

        if path not in self._created_files and not await asyncio.to_thread(
            real_path.exists
        ):
            self._created_files[path] = None

        await retry(
            lambda: asyncio.to_thread(real_path.parent.mkdir, parents=True, exist_ok=True)
        )

        # wait to avoid racing file watchers
        await settle()

        normalized = normalize_eol(content)
        await retry(lambda: asyncio.to_thread(_write_text, real_path, normalized))

    async def read(self, path: str) -> str:
        """Read a text file with line endings normalized to LF."""
        logger.debug("Reading file", path=path)
        real_path = self._resolve(path)

        return await retry(lambda: asyncio.to_thread(_read_text, real_path))

    async def exists(self, path: str) -> bool:
        real_path = self._resolve(path)
        return await asyncio.to_thread(real_path.exists)

    async def remove(self, path: str) -> None:
        """Remove a file or directory tree. Missing paths are ignored."""
        logger.debug("Removing file", path=path)
        real_path = self._resolve(path)

        await settle()

        await retry(lambda: asyncio.to_thread(_remove_path, real_path))

    async def patch(self, path: str, search: str, replacement: str) -> None:
        """Replace the first occurrence of ``search`` in a file.

        Raises:
            PatternNotFoundError: ``search`` does not occur in the file
        """
        logger.debug("Patching file", path=path, search=search, replacement=replacement)
        real_path = self._resolve(path)
        content = await retry(lambda: asyncio.to_thread(_read_text, real_path))

        if search not in content:
            raise PatternNotFoundError(path, search, content)

        await settle()

        patched = content.replace(search, replacement, 1)
        await retry(lambda: asyncio.to_thread(_write_text, real_path, patched))

    def _resolve(self, path: str) -> Path:
        self._ensure_open()
        if os.path.isabs(path):
            raise SandboxPathError(path)

        real_path = Path(os.path.normpath(self._context / path))
        if self._context not in real_path.parents:
            raise SandboxPathError(path)
        return real_path

    def _ensure_open(self) -> None:
        if self._closed:
            raise SandboxClosedError(str(self._context))

    # ------------------------------------------------------------------
    # Processes
    # ------------------------------------------------------------------

    async def exec(self, command: str, env: Optional[Mapping[str, str]] = None) -> str:
        """Run a shell command to completion.

        Args:
            command: Shell command line
            env: Variables overriding the current process environment

        Returns:
            Combined stdout and stderr

        Raises:
            CommandFailedError: non-zero exit status, carrying the same output
        """
        self._ensure_open()
        logger.info("Executing command", command=command)

        process = await self._executor.start_shell(command, env)
        self._processes.add(process)
        try:
            stdout, stderr = await self._executor.collect_output(process)
        finally:
            # a cancelled caller leaves a running process tracked for reset
            if process.returncode is not None:
                self._processes.discard(process)

        output = stdout + stderr
        if process.returncode != 0:
            raise CommandFailedError(command, process.returncode, output)
        return output

    async def spawn(
        self, command: str, env: Optional[Mapping[str, str]] = None
    ) -> asyncio.subprocess.Process:
        """Start a long-running command and return its handle immediately.

        ``command`` is split on whitespace; quoted arguments are not supported.
        """
        self._ensure_open()
        logger.info("Spawning command", command=command)

        process = await self._executor.start_program(command, env)
        self._processes.add(process)
        self._watchers[process] = asyncio.create_task(self._watch(process))

        return process

    async def _watch(self, process: asyncio.subprocess.Process) -> None:
        try:
            await self._executor.collect_output(process)
        finally:
            self._processes.discard(process)
            self._watchers.pop(process, None)

    async def kill(self, process: asyncio.subprocess.Process) -> KillResult:
        """Signal a process and its whole subtree.

        Never raises: signalling failures are logged and reported through the
        returned KillResult. The handle is untracked in every case.
        """
        sig = settings.get_kill_signal()
        pid = process.pid

        if process.returncode is not None or not pid:
            self._processes.discard(process)
            return KillResult(pid=pid, signal=sig.name, skipped=True)

        logger.info("Killing child process", pid=pid)
        try:
            result = await retry(lambda: asyncio.to_thread(signal_process_tree, pid, sig))
        except Exception as e:
            result = KillResult(pid=pid, signal=sig.name, error=str(e) or type(e).__name__)

        if result.ok:
            logger.info("Child process killed", pid=pid, pids=result.killed_pids)
        else:
            logger.warning("Failed to kill child process", pid=pid, error=result.error)

        await self._wait_for_exit(process)
        self._processes.discard(process)

        return result

    async def _wait_for_exit(self, process: asyncio.subprocess.Process) -> None:
        try:
            await asyncio.wait_for(process.wait(), timeout=settings.kill_wait_timeout)
        except asyncio.TimeoutError:
            logger.warning("Child process still running after kill", pid=process.pid)
            return

        watcher = self._watchers.get(process)
        if watcher is not None:
            await asyncio.wait({watcher}, timeout=settings.kill_wait_timeout)


async def create_sandbox() -> Sandbox:
    """Check the package artifact precondition and create a sandbox.

    Raises:
        PackageArtifactMissingError: the package under test was not packed
        SandboxEnvironmentError: the temp directory could not be created
    """
    ensure_package_artifact()
    return Sandbox()

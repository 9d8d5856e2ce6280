"""Process launching and process-tree teardown for sandboxes.

Uses asyncio subprocesses rooted at the sandbox directory, and psutil to
find every descendant of a process before signalling it.
"""

import asyncio
import os
import signal
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import psutil
import structlog

from ...models.process import KillResult
from ...utils.output import forward_stream

logger = structlog.get_logger(__name__)


class SandboxExecutor:
    """Starts processes inside a sandbox directory and tears them down.

    Stateless apart from the working directory: process tracking belongs to
    the owning Sandbox.
    """

    def __init__(self, context: Path):
        """Initialize executor for a sandbox directory.

        Args:
            context: Working directory for every started process
        """
        self._context = context

    def build_env(self, env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Merge the process environment with caller overrides (overrides win)."""
        merged = dict(os.environ)
        if env:
            merged.update({key: str(value) for key, value in env.items()})
        return merged

    async def start_shell(
        self, command: str, env: Optional[Mapping[str, str]] = None
    ) -> asyncio.subprocess.Process:
        """Start ``command`` through the shell."""
        return await asyncio.create_subprocess_shell(
            command,
            cwd=str(self._context),
            env=self.build_env(env),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    async def start_program(
        self, command: str, env: Optional[Mapping[str, str]] = None
    ) -> asyncio.subprocess.Process:
        """Start ``command`` directly, split on whitespace into program and args.

        Quoted arguments containing spaces are not supported.
        """
        argv = split_command(command)
        return await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(self._context),
            env=self.build_env(env),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    async def collect_output(self, process: asyncio.subprocess.Process) -> Tuple[str, str]:
        """Forward both streams while the process runs and wait for it to exit.

        Returns:
            Tuple of (stdout, stderr) as raw decoded text
        """
        stdout, stderr = await asyncio.gather(
            forward_stream(process.stdout),
            forward_stream(process.stderr),
        )
        await process.wait()
        return stdout, stderr


def split_command(command: str) -> List[str]:
    argv = command.split()
    if not argv:
        raise ValueError("command must not be empty")
    return argv


def signal_process_tree(pid: int, sig: signal.Signals) -> KillResult:
    """Send ``sig`` to ``pid`` and all of its descendants.

    Descendants are collected before anything is signalled so that none of
    them is reparented out of reach. A process that vanished in the meantime
    is skipped; if ``pid`` itself is gone the result carries the error.

    Raises:
        psutil.AccessDenied, OSError: signalling failed
    """
    try:
        root = psutil.Process(pid)
    except psutil.NoSuchProcess as e:
        return KillResult(pid=pid, signal=sig.name, error=str(e))

    try:
        descendants = root.children(recursive=True)
    except psutil.NoSuchProcess:
        descendants = []

    killed: List[int] = []
    for proc in [root, *descendants]:
        try:
            proc.send_signal(sig)
            killed.append(proc.pid)
        except psutil.NoSuchProcess:
            continue

    logger.debug("Signalled process tree", pid=pid, signal=sig.name, pids=killed)
    return KillResult(pid=pid, signal=sig.name, killed_pids=killed)

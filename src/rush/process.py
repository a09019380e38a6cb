"""Process descriptors for external programs.

A descriptor is built for every statement that is not an ordinary builtin.
Building looks the program up on the search path but does not start it; a
failed lookup is only reported when the statement is actually run.
"""

import asyncio
import logging
import os
import shutil
import subprocess
from typing import TYPE_CHECKING, Optional

from .errors import ProcessError

if TYPE_CHECKING:
    from .types import ShellContext, Statement, Streams

logger = logging.getLogger(__name__)


def _enter_mount_namespace() -> None:
    """Runs in the child between fork and exec.

    Only os.unshare is called here: it takes no locks, so the relay and
    reader threads of the parent cannot leave it deadlocked.
    """
    os.unshare(os.CLONE_NEWNS)


def lookup_program(name: str, search_path: str) -> Optional[str]:
    """Resolve a program name the way ``execvp`` would.

    ``$PATH`` wins when it is set; otherwise the shell's default search list
    is used.
    """
    path = os.environ.get("PATH")
    if path is None:
        path = search_path
    return shutil.which(name, path=path)


class ProcessDescriptor:
    """An external program bound to its argv, not yet started."""

    def __init__(
        self,
        argv: list[str],
        executable: Optional[str],
        *,
        new_mount_namespace: bool = False,
    ):
        self.argv = argv
        self.executable = executable
        self.new_mount_namespace = new_mount_namespace
        self.proc: Optional[asyncio.subprocess.Process] = None

    @property
    def name(self) -> str:
        return self.argv[0]

    @property
    def started(self) -> bool:
        return self.proc is not None

    async def start(self, streams: "Streams") -> None:
        """Start the program on the given streams."""
        if self.executable is None:
            raise ProcessError(
                f'exec: "{self.name}": executable file not found in $PATH: '
                f"Path {os.environ.get('PATH', '')}"
            )
        for stream in (streams.stdout, streams.stderr):
            if stream is not None:
                stream.flush()
        kwargs = {}
        if self.new_mount_namespace:
            kwargs["preexec_fn"] = _enter_mount_namespace
        try:
            self.proc = await asyncio.create_subprocess_exec(
                *self.argv,
                executable=self.executable,
                stdin=streams.stdin,
                stdout=streams.stdout,
                stderr=streams.stderr,
                **kwargs,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ProcessError(f"{self.name}: {e}: Path {os.environ.get('PATH', '')}") from e
        logger.debug("started %s as pid %d", self.executable, self.proc.pid)

    async def wait(self) -> int:
        """Wait for the program and return its exit status."""
        if self.proc is None:
            raise ProcessError(f"wait: {self.name}: not started")
        return await self.proc.wait()

    def release(self) -> None:
        self.proc = None


def build_process(ctx: "ShellContext", stmt: "Statement") -> None:
    """Attach a process descriptor to one statement."""
    stmt.isolated = ctx.registry.requires_isolation(stmt.name)
    executable = lookup_program(stmt.name, ctx.state.search_path)
    if executable is None:
        logger.debug("no program %r on the search path", stmt.name)
    stmt.process = ProcessDescriptor(
        stmt.argv,
        executable,
        new_mount_namespace=stmt.isolated,
    )


def build_processes(ctx: "ShellContext", batch: list["Statement"]) -> None:
    """Build descriptors for every statement that is not an ordinary builtin."""
    for stmt in batch:
        if ctx.registry.lookup(stmt.name) is not None:
            continue
        build_process(ctx, stmt)

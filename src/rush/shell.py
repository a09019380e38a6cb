"""Main Shell class - the interactive loop of rush.

Example usage:
    from rush import Shell

    # Interactive session on the process's own stdio
    shell = Shell()
    status = shell.interact_sync()

    # Run a single line (for scripts and tests)
    shell = Shell(stdout=open("/tmp/out", "wb"))
    shell.run("echo hi | wc -w")

    # With a different env-file directory
    shell = Shell(config=ShellConfig(env_dir="/home/me/env"))
"""

import asyncio
import logging
import sys
from typing import BinaryIO, Optional

import nest_asyncio  # type: ignore[import-untyped]

from .builtins import BuiltinRegistry, create_builtin_registry
from .errors import ExitShell, ShellError
from .executor import Sequencer
from .expansion import expand_arguments
from .parser import EOF_STATUS, parse_line, read_batch
from .process import build_processes
from .types import ShellConfig, ShellContext, ShellState, Statement
from .wiring import wire

logger = logging.getLogger(__name__)


class Shell:
    """A rush session.

    Owns the builtin registry and the mutable session state, and runs each
    batch through expansion, process building, wiring and sequencing.
    """

    def __init__(
        self,
        *,
        config: Optional[ShellConfig] = None,
        registry: Optional[BuiltinRegistry] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[BinaryIO] = None,
    ):
        """Initialize the shell.

        Args:
            config: Env directory, search path and prompt. Defaults to
                ``ShellConfig.from_environ()``.
            registry: Builtin registry. If not provided, uses the default builtins.
            stdin: Binary stream commands are read from; also the default
                stdin of every statement.
            stdout: Default stdout of every statement, and where the prompt goes.
            stderr: Default stderr of every statement, and where errors are reported.
        """
        self._config = config or ShellConfig.from_environ()
        self._registry = registry or create_builtin_registry()
        self._state = ShellState(
            env_dir=self._config.env_dir,
            search_path=self._config.search_path,
        )
        self._ctx = ShellContext(
            state=self._state,
            registry=self._registry,
            stdin=stdin or sys.stdin.buffer,
            stdout=stdout or sys.stdout.buffer,
            stderr=stderr or sys.stderr.buffer,
        )
        self._sequencer = Sequencer(self._ctx)

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def registry(self) -> BuiltinRegistry:
        return self._registry

    @property
    def context(self) -> ShellContext:
        return self._ctx

    async def execute(self, batch: list[Statement]) -> int:
        """Expand, build, wire and run one batch.

        A ``ShellError`` from any stage is reported and the rest of the
        batch is dropped; the returned status is then 1.
        """
        if not batch:
            return self._state.last_exit_code
        try:
            expand_arguments(self._ctx, batch)
            build_processes(self._ctx, batch)
            wire(self._ctx, batch)
        except ShellError as e:
            for stmt in batch:
                stmt.release()
            self._ctx.report(f"{e.stage}: {e}")
            self._state.last_exit_code = 1
            return 1
        return await self._sequencer.run_batch(batch)

    async def exec(self, line: str) -> int:
        """Parse and run one line. Returns the status of the last statement run."""
        try:
            batch = parse_line(line)
        except ShellError as e:
            self._ctx.report(f"{e.stage}: {e}")
            self._state.last_exit_code = 2
            return 2
        return await self.execute(batch)

    def run(self, line: str) -> int:
        """Run one line synchronously.

        Works inside an already running event loop as well (Jupyter,
        async frameworks) by applying nest_asyncio.
        """
        try:
            asyncio.get_running_loop()
            nest_asyncio.apply()
        except RuntimeError:
            # No running event loop, asyncio.run() will work fine
            pass
        return asyncio.run(self.exec(line))

    def _prompt(self) -> None:
        self._ctx.stdout.write(self._config.prompt.encode())
        self._ctx.stdout.flush()

    async def interact(self) -> int:
        """Read and run batches until end of input or ``exit``.

        Returns the exit status of the session.
        """
        self._prompt()
        while True:
            batch, status, error = await asyncio.to_thread(read_batch, self._ctx.stdin)
            if error is not None:
                self._ctx.report(f"{error.stage}: {error}")
                self._state.last_exit_code = 2
            try:
                await self.execute(batch)
            except ExitShell as e:
                return e.exit_code
            if status == EOF_STATUS:
                break
            self._prompt()
        return self._state.last_exit_code

    def interact_sync(self) -> int:
        """Run the interactive loop, treating a bug in rush as fatal."""
        try:
            return asyncio.run(self.interact())
        except Exception as e:
            logger.critical("Bummer: %s", e, exc_info=True)
            return 1

    async def wait_background(self) -> None:
        """Wait for background statements and pipe relays still in flight."""
        pending = [job.task for job in self._state.jobs if job.task is not None]
        pending += [relay.task for relay in self._state.relays if relay.task is not None]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

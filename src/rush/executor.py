"""Statement execution and sequencing.

Runs the statements of a batch in order. Each statement's outcome is
checked against its own link, i.e. the relation to the statement after it:

- on failure the error is reported, and the batch goes on only if the
  link is ``||``;
- on success the batch stops if the link is ``||``, and goes on otherwise.

Background statements are handed to a detached task and count as
successful right away.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from .errors import ExitShell, ProcessError, ShellError
from .types import ExecResult, Link

if TYPE_CHECKING:
    from .types import ShellContext, Statement

logger = logging.getLogger(__name__)

# Exit status used when a program could not be started at all.
NOT_STARTED = 127


def _status_message(exit_code: int) -> str:
    if exit_code < 0:
        return f"wait: signal: {-exit_code}"
    return f"wait: exit status {exit_code}"


async def _run_program(stmt: "Statement") -> ExecResult:
    if stmt.process is None:
        raise ProcessError(f"{stmt.name}: no process descriptor")
    try:
        await stmt.process.start(stmt.streams)
    except ProcessError as e:
        return ExecResult(exit_code=NOT_STARTED, message=str(e))
    exit_code = await stmt.process.wait()
    if exit_code != 0:
        return ExecResult(exit_code=exit_code, message=_status_message(exit_code))
    return ExecResult()


async def run_statement(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Run one statement to completion, as a builtin or as a program.

    The statement's streams are released afterwards whatever happens, which
    also lets a relay reading its output reach end of stream.
    """
    try:
        entry = ctx.registry.lookup(stmt.name)
        if entry is not None:
            return await entry.handler(ctx, stmt)
        return await _run_program(stmt)
    except ShellError as e:
        return ExecResult(exit_code=1, message=str(e))
    finally:
        stmt.release()


class Job:
    """A background statement running detached from the loop."""

    def __init__(self, stmt: "Statement"):
        self.stmt = stmt
        self.command = " ".join(stmt.argv)
        self.task: Optional[asyncio.Task] = None
        self.result: Optional[ExecResult] = None

    def start(self, ctx: "ShellContext") -> None:
        self.task = asyncio.create_task(self._run(ctx))
        ctx.state.jobs.append(self)
        self.task.add_done_callback(lambda task: self._finished(ctx, task))

    async def _run(self, ctx: "ShellContext") -> None:
        self.result = await run_statement(ctx, self.stmt)
        if not self.result.ok and self.result.message:
            ctx.report(self.result.message)

    def _finished(self, ctx: "ShellContext", task: asyncio.Task) -> None:
        if self in ctx.state.jobs:
            ctx.state.jobs.remove(self)
        if task.cancelled():
            logger.debug("job %r cancelled", self.command)
            return
        error = task.exception()
        if isinstance(error, ExitShell):
            ctx.report(f"{self.command}: cannot exit from a background statement")
        elif error is not None:
            logger.error("job %r failed", self.command, exc_info=error)
        else:
            logger.debug("job %r finished with %d", self.command, self.result.exit_code)


class Sequencer:
    """Runs one batch at a time, honoring links between statements."""

    def __init__(self, ctx: "ShellContext"):
        self.ctx = ctx

    async def run_batch(self, batch: list["Statement"]) -> int:
        """Run a wired batch and return the status of the last statement run."""
        next_index = 0
        try:
            for stmt in batch:
                next_index += 1
                if stmt.background:
                    Job(stmt).start(self.ctx)
                    result = ExecResult()
                else:
                    result = await run_statement(self.ctx, stmt)
                    self.ctx.state.last_exit_code = result.exit_code

                if not result.ok:
                    if result.message:
                        self.ctx.report(result.message)
                    if stmt.link is Link.OR:
                        continue
                    # && and plain sequencing both stop here.
                    break
                if stmt.link is Link.OR:
                    break
        finally:
            for stmt in batch[next_index:]:
                stmt.release()
        return self.ctx.state.last_exit_code

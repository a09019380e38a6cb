"""Control builtins: exit, true, false, colon."""

from typing import TYPE_CHECKING

from ..errors import ExitShell
from ..types import ExecResult

if TYPE_CHECKING:
    from ..types import ShellContext, Statement


async def handle_exit(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Execute the exit builtin.

    Usage: exit [n]

    Leave the shell with status n. If n is omitted, the status is that of
    the last statement run.
    """
    exit_code = ctx.state.last_exit_code
    if stmt.arguments:
        try:
            exit_code = int(stmt.arguments[0]) & 255
        except ValueError:
            return ExecResult(
                exit_code=1,
                message=f"exit: {stmt.arguments[0]}: numeric argument required",
            )
    raise ExitShell(exit_code)


async def handle_true(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    return ExecResult()


async def handle_false(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    return ExecResult(exit_code=1)


async def handle_colon(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Null command, always succeeds."""
    return ExecResult()

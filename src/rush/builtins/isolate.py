"""Isolate fork builtin.

Usage: isolate command [args...]

Only reachable through multi-call dispatch: when the shell runs a program
named ``isolate`` (a link to rush), the child is started in a fresh mount
namespace and rush, seeing its own name, replaces itself with the command.
Mounts made by the command are then invisible to the shell.
"""

import os
from typing import TYPE_CHECKING

from ..errors import BuiltinError
from ..types import ExecResult

if TYPE_CHECKING:
    from ..types import ShellContext, Statement


async def handle_isolate(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Execute the isolate builtin."""
    if not stmt.arguments:
        return ExecResult(exit_code=1, message="isolate: usage: isolate command [args...]")
    for stream in (stmt.streams.stdout, stmt.streams.stderr):
        if stream is not None:
            stream.flush()
    try:
        os.execvp(stmt.arguments[0], stmt.arguments)
    except OSError as e:
        raise BuiltinError(f"isolate: {stmt.arguments[0]}: {e.strerror or e}") from e
    return ExecResult()

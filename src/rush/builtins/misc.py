"""Session builtins: envdir, builtins, jobs.

These builtins look at or change the shell's own state.
"""

import os
from typing import TYPE_CHECKING

from ..types import ExecResult

if TYPE_CHECKING:
    from ..types import ShellContext, Statement


async def handle_envdir(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Execute the envdir builtin.

    Usage: envdir [dir]

    Without an argument, print the directory ``$name`` arguments are read
    from. With one, switch to that directory.
    """
    args = stmt.arguments
    if not args:
        stmt.write_out(ctx.state.env_dir + "\n")
        return ExecResult()
    if len(args) > 1:
        return ExecResult(exit_code=1, message="envdir: too many arguments")
    target = os.path.abspath(args[0])
    if not os.path.isdir(target):
        return ExecResult(exit_code=1, message=f"envdir: {args[0]}: Not a directory")
    ctx.state.env_dir = target
    return ExecResult()


async def handle_builtins(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """List the registered builtins, fork builtins marked with ``(fork)``."""
    lines = list(ctx.registry.builtin_names())
    lines.extend(f"{name} (fork)" for name in ctx.registry.fork_builtin_names())
    stmt.write_out("".join(line + "\n" for line in lines))
    return ExecResult()


async def handle_jobs(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """List background statements and pipe relays still in flight."""
    lines = []
    for i, job in enumerate(ctx.state.jobs, start=1):
        lines.append(f"[{i}] running {job.command}")
    for relay in ctx.state.relays:
        lines.append(f"relay {relay.label}: {relay.bytes_copied} bytes")
    stmt.write_out("".join(line + "\n" for line in lines))
    return ExecResult()

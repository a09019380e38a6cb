"""Argument expansion.

Turns each statement's raw arguments into the final argument list:

- ``$name`` arguments (modifier ``ENV``) are replaced by the contents of
  the file ``name`` in the env directory, as a single argument.
- Every other argument is glob expanded against the filesystem. Matches are
  spliced in sorted order; a pattern that matches nothing is kept as is.
"""

import glob
import os
from typing import TYPE_CHECKING

from .errors import ExpansionError
from .types import ENV_MODIFIER, RawArgument

if TYPE_CHECKING:
    from .types import ShellContext, Statement


def read_env_file(env_dir: str, value: str) -> str:
    """Read an env-file argument. Relative names resolve under env_dir."""
    path = value
    if not os.path.isabs(path):
        path = os.path.join(env_dir, path)
    try:
        with open(path, "rb") as f:
            return f.read().decode(errors="surrogateescape")
    except OSError as e:
        raise ExpansionError(f"{path}: {e.strerror or e}") from e


def expand_glob(pattern: str) -> list[str]:
    """Expand a glob pattern, falling back to the literal when nothing matches."""
    try:
        matches = glob.glob(pattern, include_hidden=True)
    except (ValueError, OSError):
        # Malformed patterns are treated as "no match".
        matches = []
    if not matches:
        return [pattern]
    return sorted(matches)


def expand_argument(ctx: "ShellContext", arg: RawArgument) -> list[str]:
    """Expand a single raw argument into zero or more final arguments."""
    if arg.modifier == ENV_MODIFIER:
        # Goes in as one argument, no word splitting on the contents.
        return [read_env_file(ctx.state.env_dir, arg.value)]
    return expand_glob(arg.value)


def expand_statement(ctx: "ShellContext", stmt: "Statement") -> None:
    """Fill in ``name`` and ``arguments`` of a statement."""
    argv: list[str] = []
    for arg in stmt.raw_arguments:
        argv.extend(expand_argument(ctx, arg))
    if not argv:
        raise ExpansionError("empty command")
    stmt.name = argv[0]
    stmt.arguments = argv[1:]


def expand_arguments(ctx: "ShellContext", batch: list["Statement"]) -> None:
    """Expand every statement in a batch.

    Stops at the first unreadable env-file; nothing has been started yet
    at this point, so the caller simply drops the batch.
    """
    for stmt in batch:
        expand_statement(ctx, stmt)

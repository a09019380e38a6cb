"""Cd builtin implementation.

Usage: cd [dir]

Change the current working directory to dir. If dir is not specified,
change to $HOME.
"""

import os
from typing import TYPE_CHECKING

from ..types import ExecResult

if TYPE_CHECKING:
    from ..types import ShellContext, Statement


async def handle_cd(ctx: "ShellContext", stmt: "Statement") -> ExecResult:
    """Execute the cd builtin."""
    args = stmt.arguments
    if len(args) > 1:
        return ExecResult(exit_code=1, message="cd: too many arguments")

    target = args[0] if args else os.environ.get("HOME", "/")
    try:
        os.chdir(target)
    except FileNotFoundError:
        return ExecResult(exit_code=1, message=f"cd: {target}: No such file or directory")
    except NotADirectoryError:
        return ExecResult(exit_code=1, message=f"cd: {target}: Not a directory")
    except OSError as e:
        return ExecResult(exit_code=1, message=f"cd: {target}: {e.strerror or e}")

    os.environ["OLDPWD"] = os.environ.get("PWD", "")
    os.environ["PWD"] = os.getcwd()
    return ExecResult()

"""rush - a small line-oriented command interpreter.

Reads one line at a time, expands its arguments, and runs each statement
as a builtin or an external program, with pipes, redirections, ``&&``,
``||`` and background execution.
"""

from .builtins import BuiltinRegistry, create_builtin_registry
from .errors import (
    BuiltinError,
    ExitShell,
    ExpansionError,
    ParseError,
    ProcessError,
    RegistrationError,
    ShellError,
    WiringError,
)
from .shell import Shell
from .types import (
    ExecResult,
    Link,
    RawArgument,
    ShellConfig,
    ShellContext,
    ShellState,
    Statement,
    Streams,
)

__version__ = "0.1.0"

__all__ = [
    "Shell",
    "ShellConfig",
    "ShellContext",
    "ShellState",
    "Statement",
    "Streams",
    "RawArgument",
    "Link",
    "ExecResult",
    "BuiltinRegistry",
    "create_builtin_registry",
    "ShellError",
    "ParseError",
    "ExpansionError",
    "WiringError",
    "BuiltinError",
    "ProcessError",
    "RegistrationError",
    "ExitShell",
]

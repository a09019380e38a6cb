"""Builtin commands for rush."""

from .cd import handle_cd
from .control import handle_colon, handle_exit, handle_false, handle_true
from .isolate import handle_isolate
from .misc import handle_builtins, handle_envdir, handle_jobs
from .registry import BuiltinEntry, BuiltinRegistry

BUILTINS = {
    "cd": handle_cd,
    "exit": handle_exit,
    "true": handle_true,
    "false": handle_false,
    ":": handle_colon,
    "envdir": handle_envdir,
    "builtins": handle_builtins,
    "jobs": handle_jobs,
}

# These must be separate processes; isolate needs its own mount namespace.
FORK_BUILTINS = {
    "isolate": (handle_isolate, True),
}


def create_builtin_registry() -> BuiltinRegistry:
    """Create a registry holding the default builtins."""
    registry = BuiltinRegistry()
    for name, handler in BUILTINS.items():
        registry.add_builtin(name, handler)
    for name, (handler, isolated) in FORK_BUILTINS.items():
        registry.add_fork_builtin(name, handler, isolated=isolated)
    return registry


__all__ = [
    "BUILTINS",
    "FORK_BUILTINS",
    "BuiltinEntry",
    "BuiltinRegistry",
    "create_builtin_registry",
]

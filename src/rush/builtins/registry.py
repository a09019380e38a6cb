"""Builtin registry.

Two tables of name to handler:

- ordinary builtins run inside the shell and share its state;
- fork builtins are only used when the program itself is invoked under
  the builtin's name (multi-call binary), in which case the program is
  nothing but that builtin.

A name can only live in one of the two tables.
"""

from dataclasses import dataclass
from typing import Optional

from ..errors import RegistrationError
from ..types import Handler


@dataclass(frozen=True)
class BuiltinEntry:
    """A registered handler and its capabilities."""

    name: str
    handler: Handler
    isolated: bool = False
    """The command must run as a separate process in a new mount namespace."""


class BuiltinRegistry:
    """Name to handler tables for ordinary and fork builtins."""

    def __init__(self):
        self._builtins: dict[str, BuiltinEntry] = {}
        self._fork_builtins: dict[str, BuiltinEntry] = {}

    def _check_free(self, name: str) -> None:
        if name in self._builtins:
            raise RegistrationError(f"{name} already a builtin")
        if name in self._fork_builtins:
            raise RegistrationError(f"{name} already a fork builtin")

    def add_builtin(self, name: str, handler: Handler, *, isolated: bool = False) -> None:
        """Register an in-process builtin."""
        self._check_free(name)
        self._builtins[name] = BuiltinEntry(name, handler, isolated)

    def add_fork_builtin(self, name: str, handler: Handler, *, isolated: bool = False) -> None:
        """Register a builtin selected by the program's invocation name."""
        self._check_free(name)
        self._fork_builtins[name] = BuiltinEntry(name, handler, isolated)

    def lookup(self, name: str) -> Optional[BuiltinEntry]:
        return self._builtins.get(name)

    def lookup_fork(self, name: str) -> Optional[BuiltinEntry]:
        return self._fork_builtins.get(name)

    def requires_isolation(self, name: str) -> bool:
        """True if a command of this name must start in a new mount namespace."""
        entry = self._builtins.get(name) or self._fork_builtins.get(name)
        return entry is not None and entry.isolated

    def builtin_names(self) -> list[str]:
        return sorted(self._builtins)

    def fork_builtin_names(self) -> list[str]:
        return sorted(self._fork_builtins)

    def __contains__(self, name: str) -> bool:
        return name in self._builtins

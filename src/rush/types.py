"""Core types for rush."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, BinaryIO, Callable, Optional

if TYPE_CHECKING:
    from .builtins.registry import BuiltinRegistry
    from .process import ProcessDescriptor
    from .wiring import Relay
    from .executor import Job


DEFAULT_SEARCH_PATH = "/go/bin:/ubin:/buildbin:/bin:/usr/local/bin:"
DEFAULT_ENV_DIR = "/env"
DEFAULT_PROMPT = "% "

ENV_MODIFIER = "ENV"


class Link(enum.Enum):
    """Relation between a statement and the one after it."""

    NONE = ""
    PIPE = "|"
    AND = "&&"
    OR = "||"


@dataclass
class RawArgument:
    """An argument as produced by the parser, before expansion."""

    value: str
    modifier: Optional[str] = None
    """``"ENV"`` means: read the argument from a file in the env directory."""


@dataclass
class Streams:
    """The three streams bound to a statement.

    ``owned`` lists the objects the statement opened itself (redirection
    files and pipe ends). Only those are closed when the statement is done;
    the interpreter's own stdio is never closed.
    """

    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None
    stderr: Optional[BinaryIO] = None
    owned: list[BinaryIO] = field(default_factory=list)

    def own(self, stream: BinaryIO) -> BinaryIO:
        self.owned.append(stream)
        return stream

    def close(self) -> None:
        """Close every stream this statement opened."""
        while self.owned:
            stream = self.owned.pop()
            try:
                stream.close()
            except OSError:
                # A pipe whose reader already went away fails on flush.
                pass


@dataclass
class Statement:
    """One pipeline stage parsed from a line of input."""

    raw_arguments: list[RawArgument] = field(default_factory=list)
    """Arguments as parsed, including the command word."""

    link: Link = Link.NONE
    """Relation to the *next* statement in the batch."""

    redirections: dict[int, str] = field(default_factory=dict)
    """Stream slot (0, 1, 2) to file path."""

    background: bool = False

    name: str = ""
    """Command name, filled in by expansion."""

    arguments: list[str] = field(default_factory=list)
    """Expanded arguments, without the command name."""

    isolated: bool = False
    """Set by the builder when the command must run in its own mount namespace."""

    process: Optional["ProcessDescriptor"] = None
    streams: Streams = field(default_factory=Streams)

    @property
    def argv(self) -> list[str]:
        return [self.name, *self.arguments]

    @property
    def pipes_to_next(self) -> bool:
        return self.link is Link.PIPE

    def write_out(self, text: str) -> None:
        """Write text to the statement's stdout (used by builtins)."""
        if self.streams.stdout is not None:
            self.streams.stdout.write(text.encode())
            self.streams.stdout.flush()

    def release(self) -> None:
        """Drop the statement's resources once it is done or abandoned."""
        self.streams.close()
        if self.process is not None:
            self.process.release()


@dataclass
class ExecResult:
    """Outcome of running one statement."""

    exit_code: int = 0
    message: str = ""
    """Error description for a failed statement."""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class ShellConfig:
    """Static configuration for a shell session."""

    env_dir: str = DEFAULT_ENV_DIR
    """Directory under which relative ``$name`` arguments are resolved."""

    search_path: str = DEFAULT_SEARCH_PATH
    """Search list used for program lookup when ``$PATH`` is unset."""

    prompt: str = DEFAULT_PROMPT

    @classmethod
    def from_environ(cls, environ: Optional[dict[str, str]] = None) -> "ShellConfig":
        """Build a config, letting ``RUSH_ENVDIR`` override the env directory."""
        environ = os.environ if environ is None else environ
        return cls(env_dir=environ.get("RUSH_ENVDIR", DEFAULT_ENV_DIR))


@dataclass
class ShellState:
    """Mutable state of a shell session."""

    env_dir: str = DEFAULT_ENV_DIR
    """Current env-file directory; builtins may change it."""

    search_path: str = DEFAULT_SEARCH_PATH

    jobs: list["Job"] = field(default_factory=list)
    """Background statements still in flight."""

    relays: list["Relay"] = field(default_factory=list)
    """Pipe relays that have not finished yet."""

    last_exit_code: int = 0


@dataclass
class ShellContext:
    """Context handed to every stage and to builtin handlers."""

    state: ShellState
    registry: "BuiltinRegistry"
    stdin: BinaryIO
    stdout: BinaryIO
    stderr: BinaryIO

    def report(self, message: str) -> None:
        """Write an error report to the shell's own stderr."""
        if not message.endswith("\n"):
            message += "\n"
        self.stderr.write(message.encode())
        self.stderr.flush()


Handler = Callable[[ShellContext, Statement], Awaitable[ExecResult]]
"""Signature of a builtin handler."""

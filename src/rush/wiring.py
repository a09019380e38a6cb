"""I/O wiring.

Binds stdin/stdout/stderr for every statement of a batch before anything
runs, and connects piped statements.

A pipe between two statements is made of two OS pipes: the upstream
statement writes into its own output handle, and a relay copies that into
the channel the downstream statement reads from. Relays run in worker
threads and finish on their own when the upstream side is closed.
"""

import asyncio
import logging
import os
import shutil
from typing import TYPE_CHECKING, BinaryIO, Optional

from .errors import WiringError

if TYPE_CHECKING:
    from .types import ShellContext, ShellState, Statement

logger = logging.getLogger(__name__)


class Relay:
    """Copies one statement's output into the next statement's input."""

    def __init__(self, source: BinaryIO, sink: BinaryIO, label: str):
        self.source = source
        self.sink = sink
        self.label = label
        self.task: Optional[asyncio.Task] = None
        self.bytes_copied = 0
        self.error: Optional[OSError] = None

    def start(self, state: "ShellState") -> None:
        """Schedule the copy. Nobody waits for it."""
        self.task = asyncio.create_task(asyncio.to_thread(self._copy))
        state.relays.append(self)
        self.task.add_done_callback(lambda _: self._finished(state))

    def _copy(self) -> None:
        try:
            while True:
                chunk = self.source.read(shutil.COPY_BUFSIZE)
                if not chunk:
                    break
                self.sink.write(chunk)
                self.bytes_copied += len(chunk)
        except OSError as e:
            self.error = e
        finally:
            self.sink.close()
            self.source.close()

    def _finished(self, state: "ShellState") -> None:
        if self in state.relays:
            state.relays.remove(self)
        if self.error is not None:
            logger.debug("relay %s stopped: %s", self.label, self.error)
        else:
            logger.debug("relay %s done after %d bytes", self.label, self.bytes_copied)


def _pipe() -> tuple[BinaryIO, BinaryIO]:
    try:
        r, w = os.pipe()
    except OSError as e:
        raise WiringError(f"pipe: {e.strerror or e}") from e
    return os.fdopen(r, "rb", buffering=0), os.fdopen(w, "wb", buffering=0)


def open_read(stmt: "Statement", default: BinaryIO) -> BinaryIO:
    """Return the statement's input: the slot 0 redirection, or the default."""
    path = stmt.redirections.get(0)
    if not path:
        return default
    try:
        return stmt.streams.own(open(path, "rb"))
    except OSError as e:
        raise WiringError(f"open {path}: {e.strerror or e}") from e


def open_write(stmt: "Statement", slot: int, default: BinaryIO) -> BinaryIO:
    """Return the stream for slot 1 or 2, creating or truncating a redirection target."""
    path = stmt.redirections.get(slot)
    if not path:
        return default
    try:
        return stmt.streams.own(open(path, "wb"))
    except OSError as e:
        raise WiringError(f"open {path}: {e.strerror or e}") from e


def connect(ctx: "ShellContext", upstream: "Statement", downstream: "Statement") -> Relay:
    """Pipe upstream's stdout into downstream's stdin through a relay."""
    out_read, out_write = _pipe()
    upstream.streams.stdout = upstream.streams.own(out_write)
    try:
        chan_read, chan_write = _pipe()
    except WiringError:
        out_read.close()
        raise
    downstream.streams.stdin = downstream.streams.own(chan_read)

    relay = Relay(out_read, chan_write, f"{upstream.name} | {downstream.name}")
    relay.start(ctx.state)
    return relay


def wire(ctx: "ShellContext", batch: list["Statement"]) -> list[Relay]:
    """Bind streams for a whole batch.

    On failure every stream opened so far is closed and the error is
    re-raised; no statement of the batch will run.
    """
    relays: list[Relay] = []
    try:
        for i, stmt in enumerate(batch):
            streams = stmt.streams
            if streams.stdin is None:
                streams.stdin = open_read(stmt, ctx.stdin)
            # Piping wins over an explicit stdout redirection.
            if not stmt.pipes_to_next:
                streams.stdout = open_write(stmt, 1, ctx.stdout)
            streams.stderr = open_write(stmt, 2, ctx.stderr)
            if not stmt.pipes_to_next:
                continue
            if i + 1 >= len(batch):
                raise WiringError(f"{stmt.name}: pipe to nothing")
            relays.append(connect(ctx, stmt, batch[i + 1]))
    except WiringError:
        for stmt in batch:
            stmt.release()
        raise
    return relays

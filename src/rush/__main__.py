"""Program entry for rush.

If the program is invoked under the name of a fork builtin (a link to
rush named ``isolate``, say), it runs only that builtin and exits.
Otherwise it starts an interactive session; scripts and arguments are not
supported.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from .builtins import BuiltinRegistry, create_builtin_registry
from .errors import ShellError
from .shell import Shell
from .types import ShellConfig, ShellContext, ShellState, Statement, Streams

logger = logging.getLogger("rush")


def setup_logging() -> None:
    level = os.environ.get("RUSH_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def dispatch_fork_builtin(registry: BuiltinRegistry, argv: list[str]) -> Optional[int]:
    """Run the fork builtin named by argv[0], if there is one.

    Returns the exit status, or None when argv[0] names no fork builtin.
    """
    name = os.path.basename(argv[0])
    entry = registry.lookup_fork(name)
    if entry is None:
        return None

    config = ShellConfig.from_environ()
    ctx = ShellContext(
        state=ShellState(env_dir=config.env_dir, search_path=config.search_path),
        registry=registry,
        stdin=sys.stdin.buffer,
        stdout=sys.stdout.buffer,
        stderr=sys.stderr.buffer,
    )
    stmt = Statement(
        name=name,
        arguments=argv[1:],
        streams=Streams(stdin=ctx.stdin, stdout=ctx.stdout, stderr=ctx.stderr),
    )
    try:
        result = asyncio.run(entry.handler(ctx, stmt))
    except ShellError as e:
        logger.critical("%s", e)
        return 1
    if not result.ok:
        logger.critical("%s", result.message or f"{name}: exit status {result.exit_code}")
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    setup_logging()

    registry = create_builtin_registry()
    status = dispatch_fork_builtin(registry, argv)
    if status is not None:
        return status

    if len(argv) != 1:
        print("no scripts/args yet")
        return 1

    return Shell(registry=registry).interact_sync()


if __name__ == "__main__":
    sys.exit(main())

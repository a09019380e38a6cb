"""Shared fixtures for rush tests."""

import os
from pathlib import Path

import pytest

from rush import Shell, ShellConfig


class Harness:
    """A shell whose stdio are real files under a temporary directory."""

    def __init__(self, tmp_path: Path, stdin_text: str = "", **shell_kwargs):
        self.tmp_path = tmp_path
        self.env_dir = tmp_path / "env"
        self.env_dir.mkdir(exist_ok=True)
        stdin_path = tmp_path / "stdin"
        stdin_path.write_text(stdin_text)
        self._stdin = open(stdin_path, "rb")
        self._stdout = open(tmp_path / "stdout", "wb")
        self._stderr = open(tmp_path / "stderr", "wb")
        shell_kwargs.setdefault("config", ShellConfig(env_dir=str(self.env_dir)))
        self.shell = Shell(
            stdin=self._stdin,
            stdout=self._stdout,
            stderr=self._stderr,
            **shell_kwargs,
        )

    async def exec(self, line: str) -> int:
        return await self.shell.exec(line)

    @property
    def stdout(self) -> str:
        self._stdout.flush()
        return (self.tmp_path / "stdout").read_text()

    @property
    def stderr(self) -> str:
        self._stderr.flush()
        return (self.tmp_path / "stderr").read_text()

    def path(self, name: str) -> str:
        return str(self.tmp_path / name)

    def close(self) -> None:
        for f in (self._stdin, self._stdout, self._stderr):
            f.close()


@pytest.fixture
def harness(tmp_path):
    h = Harness(tmp_path)
    yield h
    h.close()


@pytest.fixture
def make_harness(tmp_path):
    """Build a harness with custom stdin text or shell arguments."""
    made = []

    def _make(stdin_text: str = "", **shell_kwargs) -> Harness:
        h = Harness(tmp_path, stdin_text, **shell_kwargs)
        made.append(h)
        return h

    yield _make
    for h in made:
        h.close()


@pytest.fixture
def devnull():
    f = open(os.devnull, "rb")
    yield f
    f.close()

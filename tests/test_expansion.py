"""Tests for argument expansion."""

import pytest

from rush.errors import ExpansionError
from rush.expansion import expand_arguments, expand_glob, read_env_file
from rush.types import ENV_MODIFIER, RawArgument, Statement


def _stmt(*args: RawArgument) -> Statement:
    return Statement(raw_arguments=list(args))


class TestEnvFiles:
    """Test ``$name`` arguments read from the env directory."""

    def test_relative_name_reads_from_env_dir(self, harness):
        (harness.env_dir / "HOME").write_text("/home/a user")
        stmt = _stmt(RawArgument("echo"), RawArgument("HOME", ENV_MODIFIER))
        expand_arguments(harness.shell.context, [stmt])
        assert stmt.name == "echo"
        assert stmt.arguments == ["/home/a user"]

    def test_absolute_path_is_used_as_is(self, harness, tmp_path):
        target = tmp_path / "elsewhere"
        target.write_text("x y\nz")
        assert read_env_file("/nonexistent", str(target)) == "x y\nz"

    def test_missing_file_fails(self, harness):
        stmt = _stmt(RawArgument("echo"), RawArgument("NOPE", ENV_MODIFIER))
        with pytest.raises(ExpansionError, match="NOPE"):
            expand_arguments(harness.shell.context, [stmt])

    def test_env_dir_follows_state(self, harness, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        (other / "V").write_text("from other")
        harness.shell.state.env_dir = str(other)
        stmt = _stmt(RawArgument("V", ENV_MODIFIER))
        expand_arguments(harness.shell.context, [stmt])
        assert stmt.name == "from other"


class TestGlob:
    """Test filesystem glob expansion."""

    def test_matches_are_sorted(self, tmp_path):
        for name in ("c.txt", "a.txt", "b.txt", "d.log"):
            (tmp_path / name).write_text("")
        matches = expand_glob(str(tmp_path / "*.txt"))
        assert matches == [str(tmp_path / n) for n in ("a.txt", "b.txt", "c.txt")]

    def test_no_match_keeps_literal(self, tmp_path):
        pattern = str(tmp_path / "*.xyz")
        assert expand_glob(pattern) == [pattern]

    def test_plain_word_is_unchanged(self):
        assert expand_glob("hello") == ["hello"]

    def test_malformed_pattern_keeps_literal(self):
        assert expand_glob("[") == ["["]

    def test_hidden_files_match(self, tmp_path):
        (tmp_path / ".hidden").write_text("")
        assert expand_glob(str(tmp_path / "*")) == [str(tmp_path / ".hidden")]

    def test_matches_are_spliced_in_place(self, harness, tmp_path):
        (tmp_path / "g1").write_text("")
        (tmp_path / "g2").write_text("")
        stmt = _stmt(
            RawArgument("ls"),
            RawArgument("-l"),
            RawArgument(str(tmp_path / "g*")),
            RawArgument("end"),
        )
        expand_arguments(harness.shell.context, [stmt])
        assert stmt.arguments == ["-l", str(tmp_path / "g1"), str(tmp_path / "g2"), "end"]

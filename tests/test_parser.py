"""Tests for the line parser."""

import io

import pytest

from rush.errors import ParseError
from rush.parser import parse_line, read_batch, tokenize
from rush.types import ENV_MODIFIER, Link


class TestTokenize:
    """Test splitting a line into words and operators."""

    def test_words_and_operators(self):
        tokens = tokenize("echo hi|wc -w && ls || true; sleep 1 &")
        values = [t.value for t in tokens]
        assert values == [
            "echo", "hi", "|", "wc", "-w", "&&", "ls", "||", "true", ";",
            "sleep", "1", "&",
        ]

    def test_quotes_are_removed(self):
        tokens = tokenize("""echo 'a b' "c | d" e'f'g""")
        assert [t.value for t in tokens] == ["echo", "a b", "c | d", "efg"]
        assert not any(t.is_operator for t in tokens)

    def test_dollar_word_is_env(self):
        tokens = tokenize("echo $HOME '$HOME' $")
        assert tokens[1].value == "HOME" and tokens[1].is_env
        assert tokens[2].value == "$HOME" and not tokens[2].is_env
        assert tokens[3].value == "$" and not tokens[3].is_env

    def test_stderr_redirect_operator(self):
        tokens = tokenize("cmd 2> err > out < in")
        ops = [t.value for t in tokens if t.is_operator]
        assert ops == ["2>", ">", "<"]

    def test_unterminated_quote(self):
        with pytest.raises(ParseError, match="unterminated"):
            tokenize("echo 'oops")


class TestParseLine:
    """Test building statements from a line."""

    def test_empty_line(self):
        assert parse_line("\n") == []

    def test_links(self):
        batch = parse_line("a | b && c || d ; e")
        assert [s.link for s in batch] == [Link.PIPE, Link.AND, Link.OR, Link.NONE, Link.NONE]
        assert [s.raw_arguments[0].value for s in batch] == ["a", "b", "c", "d", "e"]

    def test_background(self):
        batch = parse_line("sleep 1 & echo done")
        assert batch[0].background is True
        assert batch[0].link is Link.NONE
        assert batch[1].background is False

    def test_redirections(self):
        batch = parse_line("sort < in.txt > out.txt 2> err.txt")
        stmt = batch[0]
        assert stmt.redirections == {0: "in.txt", 1: "out.txt", 2: "err.txt"}
        assert [a.value for a in stmt.raw_arguments] == ["sort"]

    def test_env_modifier(self):
        stmt = parse_line("echo $USER")[0]
        assert stmt.raw_arguments[1].modifier == ENV_MODIFIER
        assert stmt.raw_arguments[1].value == "USER"

    @pytest.mark.parametrize("line", ["echo |", "a &&", "b ||", "| wc", "a | | b"])
    def test_dangling_operators(self, line):
        with pytest.raises(ParseError):
            parse_line(line)

    def test_missing_redirect_target(self):
        with pytest.raises(ParseError, match="missing file name"):
            parse_line("echo hi >")

    def test_redirect_without_command(self):
        with pytest.raises(ParseError):
            parse_line("> out.txt")


class TestReadBatch:
    """Test reading one batch from a stream."""

    def test_reads_one_line(self):
        reader = io.BytesIO(b"echo one\necho two\n")
        batch, status, error = read_batch(reader)
        assert error is None
        assert status == ""
        assert batch[0].raw_arguments[1].value == "one"

    def test_end_of_input(self):
        batch, status, error = read_batch(io.BytesIO(b""))
        assert batch == []
        assert status == "EOF"
        assert error is None

    def test_last_line_without_newline(self):
        batch, status, _ = read_batch(io.BytesIO(b"echo last"))
        assert status == "EOF"
        assert len(batch) == 1

    def test_parse_error_is_returned(self):
        batch, status, error = read_batch(io.StringIO("echo |\n"))
        assert batch == []
        assert isinstance(error, ParseError)

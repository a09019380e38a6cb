"""Line parser for rush.

Reads one line of input and splits it into statements. The grammar is
deliberately small:

    line       := statement (separator statement)* [separator]
    separator  := '|' | '&&' | '||' | ';' | '&'
    statement  := (word | redirection)+
    redirection:= ('<' | '>' | '2>') word

Words may be single or double quoted (quotes are removed, nothing inside is
interpreted). An unquoted word starting with ``$`` is an env-file argument
naming the rest of the word.
"""

from dataclasses import dataclass
from typing import IO, Optional, Union

from .errors import ParseError
from .types import ENV_MODIFIER, Link, RawArgument, Statement

EOF_STATUS = "EOF"

_LINK_OPERATORS = {
    "|": Link.PIPE,
    "&&": Link.AND,
    "||": Link.OR,
    ";": Link.NONE,
    "&": Link.NONE,
}

_REDIRECT_OPERATORS = {
    "<": 0,
    ">": 1,
    "2>": 2,
}


@dataclass
class Token:
    """A word or an operator from the input line."""

    value: str
    is_operator: bool = False
    is_env: bool = False


def tokenize(line: str) -> list[Token]:
    """Split a line into words and operators."""
    tokens: list[Token] = []
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c.isspace():
            i += 1
            continue

        two = line[i:i + 2]
        if two in ("&&", "||", "2>"):
            tokens.append(Token(two, is_operator=True))
            i += 2
            continue
        if c in "|&;<>":
            tokens.append(Token(c, is_operator=True))
            i += 1
            continue

        # A word runs until whitespace or an operator character.
        word = []
        quoted = False
        start = i
        while i < n and not line[i].isspace() and line[i] not in "|&;<>":
            c = line[i]
            if c in "'\"":
                end = line.find(c, i + 1)
                if end < 0:
                    raise ParseError(f"unterminated {c} quote")
                word.append(line[i + 1:end])
                quoted = True
                i = end + 1
            else:
                word.append(c)
                i += 1
        value = "".join(word)
        if not quoted and line[start] == "$" and len(value) > 1:
            tokens.append(Token(value[1:], is_env=True))
        else:
            tokens.append(Token(value))
    return tokens


def parse_line(line: str) -> list[Statement]:
    """Turn one line into a batch of statements."""
    batch: list[Statement] = []
    current = Statement()
    pending_slot: Optional[int] = None

    for token in tokenize(line):
        if not token.is_operator:
            if pending_slot is not None:
                current.redirections[pending_slot] = token.value
                pending_slot = None
            else:
                modifier = ENV_MODIFIER if token.is_env else None
                current.raw_arguments.append(RawArgument(token.value, modifier))
            continue

        if pending_slot is not None:
            raise ParseError(f"missing file name before {token.value!r}")
        if token.value in _REDIRECT_OPERATORS:
            pending_slot = _REDIRECT_OPERATORS[token.value]
            continue
        if not current.raw_arguments:
            raise ParseError(f"syntax error near {token.value!r}")
        current.link = _LINK_OPERATORS[token.value]
        current.background = token.value == "&"
        batch.append(current)
        current = Statement()

    if pending_slot is not None:
        raise ParseError("missing file name after redirection")
    if current.raw_arguments:
        batch.append(current)
    elif current.redirections:
        raise ParseError("redirection without a command")
    elif batch and batch[-1].link is not Link.NONE:
        raise ParseError(f"missing command after {batch[-1].link.value!r}")
    return batch


def read_batch(reader: IO) -> tuple[list[Statement], str, Optional[ParseError]]:
    """Read and parse one line from reader.

    Returns the batch, the termination status (``"EOF"`` once the input is
    exhausted, ``""`` otherwise) and the parse error, if any. A line that
    fails to parse yields an empty batch.
    """
    line: Union[str, bytes] = reader.readline()
    if isinstance(line, bytes):
        line = line.decode(errors="surrogateescape")
    status = "" if line.endswith("\n") else EOF_STATUS
    try:
        return parse_line(line), status, None
    except ParseError as e:
        return [], status, e

"""Exceptions raised by the rush stages.

Every stage failure is a ``ShellError``. The interactive loop reports it on
stderr and drops the rest of the batch. Anything else escaping a stage is a
bug in rush itself and ends the session.
"""


class ShellError(Exception):
    """Base class for recoverable shell errors."""

    stage = "rush"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseError(ShellError):
    """The input line could not be split into statements."""

    stage = "parse"


class ExpansionError(ShellError):
    """An env-file argument could not be read."""

    stage = "args problem"


class WiringError(ShellError):
    """A redirection target or pipe could not be set up."""

    stage = "wire"


class BuiltinError(ShellError):
    """A builtin handler failed."""

    stage = "builtin"


class ProcessError(ShellError):
    """An external program could not be started or waited for."""

    stage = "exec"


class RegistrationError(ShellError):
    """A builtin name is already taken."""

    stage = "register"


class ExitShell(Exception):
    """Raised by the ``exit`` builtin to end the interactive loop."""

    def __init__(self, exit_code: int = 0):
        super().__init__(exit_code)
        self.exit_code = exit_code

"""
Errors -- The uniform error channel of the dispatcher

Every user-facing failure derives from CommandError:
- UnrecognizedCommand: a name resolved to nothing
- RcPassthroughError: a child process exited non-zero; carries its code
- SilentError: already reported, must not be printed again
- FlagError / HelpRequested: raised by flag parsing

RegistryError is different: it reports programmer mistakes while commands
are being registered and is raised immediately.
"""


class CommandError(Exception):
    """Base class for errors surfaced by commands."""


class UnrecognizedCommand(CommandError):
    """The named command is not recognized."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unrecognized command: {self.name}"


class RcPassthroughError(CommandError):
    """
    Carries the exit status of a child process.

    Propagates unchanged to the process boundary, where main() exits with
    exactly this code and prints nothing.
    """

    def __init__(self, code: int):
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"subprocess encountered error code {self.code}"


def is_rc_passthrough_error(err: BaseException) -> bool:
    """Check whether err carries a child's exit status."""
    return isinstance(err, RcPassthroughError)


class SilentError(CommandError):
    """The error was already logged; outer layers must not report it again."""

    def __str__(self) -> str:
        return "silent error"


class FlagError(CommandError):
    """Command-line flags could not be parsed."""


class HelpRequested(CommandError):
    """-h/--help was given to a flag set that does not declare it."""

    def __str__(self) -> str:
        return "flag: help requested"


class RegistryError(ValueError):
    """Invalid registration: duplicate name, missing name or command."""

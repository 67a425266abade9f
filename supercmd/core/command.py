"""
Command -- The contract every dispatchable command implements

A command moves through three steps, driven by main() or by a parent
SuperCommand:
1. set_flags(f): declare flags on a FlagSet
2. init(args): validate the positional arguments left after flag parsing
3. run(ctx): do the work, raising CommandError on failure

Context carries the invocation's working directory, environment and
standard streams so commands never touch sys.* directly.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, IO, List, Optional

from ..errors import CommandError
from .flags import FlagSet

logger = logging.getLogger(__name__)


@dataclass
class Info:
    """Help information about a command."""
    name: str
    args: str = ""
    purpose: str = ""
    doc: str = ""
    aliases: List[str] = field(default_factory=list)

    def help(self, flags: FlagSet) -> str:
        """Render the full help text for the command using flags for options."""
        has_options = flags.has_flags()
        lines = ["usage: " + self.name
                 + (" [options]" if has_options else "")
                 + (" " + self.args if self.args else "")]
        if self.purpose:
            lines.append(f"purpose: {self.purpose}")
        text = "\n".join(lines) + "\n"
        if has_options:
            text += "\noptions:\n" + flags.format_defaults()
        doc = self.doc.strip()
        if doc:
            text += f"\n{doc}\n"
        if self.aliases:
            text += "\naliases: " + ", ".join(self.aliases) + "\n"
        return text


@dataclass
class Context:
    """The environment a command runs in."""
    dir: str
    env: Dict[str, str] = field(default_factory=dict)
    stdin: IO = None
    stdout: IO = None
    stderr: IO = None
    quiet: bool = False
    verbose: bool = False

    def infof(self, fmt: str, *args) -> None:
        """Log at info level and, unless quiet, print the message to stderr."""
        message = fmt % args if args else fmt
        logger.info(message)
        if not self.quiet:
            self.stderr.write(message + "\n")

    def verbosef(self, fmt: str, *args) -> None:
        """Print the message to stderr only in verbose mode."""
        if self.verbose:
            message = fmt % args if args else fmt
            self.stderr.write(message + "\n")

    def abs_path(self, path: str) -> str:
        """Resolve path relative to the context directory."""
        if os.path.isabs(path):
            return path
        return os.path.join(self.dir, path)

    def getenv(self, key: str) -> str:
        return self.env.get(key, "")


def default_context() -> Context:
    """Context for the current process."""
    return Context(
        dir=os.getcwd(),
        env=dict(os.environ),
        stdin=sys.stdin,
        stdout=sys.stdout,
        stderr=sys.stderr,
    )


class Command(ABC):
    """A command that can be registered with a SuperCommand or run by main()."""

    @abstractmethod
    def info(self) -> Info:
        """Help information about the command."""

    @abstractmethod
    def set_flags(self, f: FlagSet) -> None:
        """Declare the command's flags on f."""

    @abstractmethod
    def init(self, args: List[str]) -> None:
        """Initialize the command from its positional arguments."""

    @abstractmethod
    def run(self, ctx: Context) -> None:
        """Execute the command."""

    @abstractmethod
    def allow_interspersed_flags(self) -> bool:
        """Whether flags may follow positional arguments."""

    @abstractmethod
    def is_super_command(self) -> bool:
        """Whether the command holds its own registry of subcommands."""


class CommandBase(Command):
    """Defaults for leaf commands: no flags, no arguments."""

    def set_flags(self, f: FlagSet) -> None:
        pass

    def init(self, args: List[str]) -> None:
        check_empty(args)

    def allow_interspersed_flags(self) -> bool:
        return True

    def is_super_command(self) -> bool:
        return False


def check_empty(args: List[str]) -> None:
    """Raise if any arguments remain."""
    if args:
        quoted = " ".join(f'"{arg}"' for arg in args)
        raise CommandError(f"unrecognized args: [{quoted}]")


def zero_or_one_args(args: List[str]) -> Optional[str]:
    """Return the single argument (or None); raise on more than one."""
    if not args:
        return None
    check_empty(args[1:])
    return args[0]

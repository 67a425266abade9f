"""
FlagSet -- Shareable flag declarations backed by argparse

A Flag writes its parsed value straight onto the object that declared it
(target + attribute). That makes flags shareable: a super-command copies its
common flags into another FlagSet with var(), and whichever set parses them,
the super-command sees the values.

Parsing modes:
- interspersed: flags and positional arguments may be mixed
- non-interspersed: flags must come first; everything from the first
  positional argument onward is left untouched in args()
"""

import argparse
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..errors import FlagError, HelpRequested


_TYPES = {
    "bool": None,
    "string": str,
    "int": int,
}


@dataclass
class Flag:
    """A single named flag bound to target.attr."""
    name: str
    target: Any
    attr: str
    kind: str = "bool"
    default: Any = False
    usage: str = ""

    @property
    def option(self) -> str:
        """Command-line spelling: -x for one letter, --name otherwise."""
        if len(self.name) == 1:
            return "-" + self.name
        return "--" + self.name

    def set(self, value: Any) -> None:
        setattr(self.target, self.attr, value)

    def format_default(self) -> str:
        if self.kind == "bool":
            return "true" if self.default else "false"
        if self.kind == "string":
            return f'"{self.default}"'
        return str(self.default)


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message):
        raise FlagError(message)


class FlagSet:
    """
    An ordered set of flags.

    Declaring a flag assigns its default to the target immediately, so a
    command's attributes are valid even if parse() is never called.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._flags: Dict[str, Flag] = {}
        self._args: List[str] = []

    # -------------------------------------------------------------------------
    # Declaration
    # -------------------------------------------------------------------------

    def bool_var(self, target: Any, attr: str, name: str, default: bool, usage: str) -> None:
        self._declare(Flag(name, target, attr, "bool", default, usage))

    def string_var(self, target: Any, attr: str, name: str, default: str, usage: str) -> None:
        self._declare(Flag(name, target, attr, "string", default, usage))

    def int_var(self, target: Any, attr: str, name: str, default: int, usage: str) -> None:
        self._declare(Flag(name, target, attr, "int", default, usage))

    def var(self, flag: Flag) -> None:
        """Add an existing flag without resetting its target."""
        if flag.name in self._flags:
            raise FlagError(f"{self.name} flag redefined: {flag.name}")
        self._flags[flag.name] = flag

    def _declare(self, flag: Flag) -> None:
        self.var(flag)
        flag.set(flag.default)

    def lookup(self, name: str) -> Optional[Flag]:
        return self._flags.get(name)

    def visit_all(self, fn: Callable[[Flag], None]) -> None:
        """Call fn for every flag in lexicographical order."""
        for name in sorted(self._flags):
            fn(self._flags[name])

    def has_flags(self) -> bool:
        return bool(self._flags)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def parse(self, allow_intersperse: bool, args: List[str]) -> None:
        """
        Parse args, setting declared flags on their targets.

        The remaining positional arguments are available from args().

        Raises:
            FlagError: unknown flag or bad value
            HelpRequested: -h/--help given but not declared here
        """
        parser = _FlagParser(prog=self.name or None, add_help=False, allow_abbrev=False)
        dests: Dict[str, Flag] = {}
        for index, flag in enumerate(self._flags.values()):
            dest = f"flag_{index}"
            dests[dest] = flag
            if flag.kind == "bool":
                parser.add_argument(flag.option, dest=dest, action="store_true",
                                    default=argparse.SUPPRESS)
            else:
                parser.add_argument(flag.option, dest=dest, type=_TYPES[flag.kind],
                                    default=argparse.SUPPRESS)

        help_options = [opt for opt in ("-h", "--help")
                        if opt.lstrip("-") not in self._flags]
        if help_options:
            parser.add_argument(*help_options, dest="help_requested",
                                action="store_true", default=False)

        args = self._join_values(allow_intersperse, args)
        if allow_intersperse:
            parser.add_argument("args", nargs="*")
            namespace = parser.parse_intermixed_args(args)
        else:
            parser.add_argument("args", nargs=argparse.REMAINDER)
            namespace = parser.parse_args(args)

        if getattr(namespace, "help_requested", False):
            raise HelpRequested()

        for dest, value in vars(namespace).items():
            if dest in dests:
                dests[dest].set(value)
        self._args = list(namespace.args)

    def _join_values(self, allow_intersperse: bool, args: List[str]) -> List[str]:
        """
        Attach each value flag's next token to it as "--name=value".

        A value flag takes the following token whatever it looks like, so
        "-e -weird" sets e to "-weird"; argparse would refuse the dash.
        """
        value_options = {flag.option for flag in self._flags.values() if flag.kind != "bool"}
        joined = []
        index = 0
        while index < len(args):
            arg = args[index]
            index += 1
            if arg == "--":
                joined.extend(args[index - 1:])
                break
            if arg in value_options and index < len(args):
                joined.append(f"{arg}={args[index]}")
                index += 1
                continue
            joined.append(arg)
            if not allow_intersperse and (arg == "-" or not arg.startswith("-")):
                joined.extend(args[index:])
                break
        return joined

    def args(self) -> List[str]:
        """Positional arguments left over by the last parse()."""
        return list(self._args)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def format_defaults(self) -> str:
        """
        Describe every flag, grouping flags that share a value.

        Example:
            -h, --help  (= false)
                show help on a command or other topic
        """
        groups: Dict[tuple, List[Flag]] = {}
        self.visit_all(lambda flag: groups.setdefault((id(flag.target), flag.attr), []).append(flag))

        lines = []
        for flags in sorted(groups.values(), key=lambda group: max(flag.name for flag in group)):
            flags.sort(key=lambda flag: _sort_key(flag.name))
            options = ", ".join(flag.option for flag in flags)
            usage = next((flag.usage for flag in flags if flag.usage), "")
            lines.append(f"{options}  (= {flags[0].format_default()})")
            lines.append(f"    {usage}")
        return "\n".join(lines) + ("\n" if lines else "")


def _sort_key(name: str) -> tuple:
    # Short spellings before long ones: -h before --help.
    return (len(name) > 1, name)

"""
SuperCommand -- A command that selects a subcommand and runs it

A SuperCommand owns a Registry of subcommands. init() takes the first
positional argument as the subcommand name, resolves it, parses the
remaining flags and initializes the selected command; run() performs the
shared pre-run work (logging, run notification, deprecation warning) and
runs it.

SuperCommands nest: a SuperCommand registered inside another one gets its
own private flag scope, while leaf commands share the common flags (logging,
-h/--help, --description) of the SuperCommand that selected them.

Error policy: run() is the single place that reports failures. Errors that
are already silent, or that carry a child exit status, pass through
unchanged; anything else is logged once and replaced by SilentError.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import RcPassthroughError, RegistryError, SilentError, UnrecognizedCommand
from .command import Command, Context, Info, check_empty
from .flags import Flag, FlagSet
from .help import HELP_PURPOSE, HelpCommand
from .log import Log
from .missing import MissingCallback, MissingCommand
from .registry import Action, DeprecationCheck, Registry, new_action_from_command
from .topics import echo
from .version import VersionCommand

logger = logging.getLogger(__name__)


@dataclass
class SuperCommandParams:
    """Parameters for creating a SuperCommand."""
    name: str
    purpose: str = ""
    doc: str = ""
    log: Optional[Log] = None
    missing_callback: Optional[MissingCallback] = None
    aliases: List[str] = field(default_factory=list)
    version: str = ""
    # Set when this SuperCommand is itself a subcommand of another one;
    # notify_run then reports "<usage_prefix> <name>".
    usage_prefix: str = ""
    notify_run: Optional[Callable[[str], None]] = None


class SuperCommand(Command):
    """A command that dispatches to one of its registered subcommands."""

    def __init__(self, params: SuperCommandParams):
        self.name = params.name
        self.purpose = params.purpose
        self.doc = params.doc
        self.log = params.log
        self.aliases = list(params.aliases)
        self.version = params.version
        self.usage_prefix = params.usage_prefix
        self.missing_callback = params.missing_callback
        self.notify_run = params.notify_run

        self.action: Optional[Action] = None
        self.show_help = False
        self.show_description = False
        self.show_version = False
        self.flags: Optional[FlagSet] = None
        self.commonflags: Optional[FlagSet] = None
        self._common: List[Flag] = []

        self.help = HelpCommand(self)
        self.subcmds = Registry.with_default(Action(name="help", command=self.help))
        if self.version:
            self.subcmds.add(Action(name="version", command=VersionCommand(self.version)))

    def is_super_command(self) -> bool:
        return True

    # For a SuperCommand only its own flags may come before the subcommand
    # name; everything from the name onward belongs to the subcommand.
    def allow_interspersed_flags(self) -> bool:
        return False

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, subcmd: Optional[Command]) -> None:
        """Make subcmd available under its name and aliases."""
        if subcmd is None:
            return
        self.subcmds.add_with_aliases(new_action_from_command(subcmd))

    def register_deprecated(self, subcmd: Optional[Command], check: Optional[DeprecationCheck]) -> None:
        """
        Register subcmd unless check says it is obsolete.

        A deprecated command is registered with its replacement recorded, so
        running it prints a warning and listings hide it.
        """
        if subcmd is None:
            return
        action = new_action_from_command(subcmd)
        if check is not None:
            if check.obsolete():
                logger.info('"%s" command not registered as it is obsolete', action.name)
                return
            deprecated, replacement = check.deprecated()
            if deprecated:
                action.replacement = replacement
        self.subcmds.add_with_aliases(action)

    def register_alias(self, name: str, for_name: str, check: Optional[DeprecationCheck] = None) -> None:
        """Make the registered command for_name also available as name."""
        if check is not None and check.obsolete():
            logger.info('"%s" alias not registered as it is obsolete', name)
            return
        self.subcmds.add_alias(for_name, name)

    def register_super_alias(self, name: str, super_name: str, for_name: str,
                             check: Optional[DeprecationCheck] = None) -> None:
        """Make the subcommand for_name of the registered super_name available as name."""
        if check is not None and check.obsolete():
            logger.info('"%s" alias not registered as it is obsolete', name)
            return

        aliased = f"{super_name} {for_name}"
        action = self.subcmds.lookup(super_name, for_name)
        if action is None:
            parent = self.subcmds.lookup(super_name)
            if parent is not None and not parent.command.is_super_command():
                raise RegistryError(f'"{super_name}" is not a SuperCommand')
            raise RegistryError(f'"{aliased}" not found when registering alias')

        action = action.new_alias(name)
        action.aliased_name = aliased
        self.subcmds.add(action)

    def add_help_topic(self, name: str, short: str, long: str, *aliases: str) -> None:
        """Add a help topic shown by "help <name>"; short is listed in "help topics"."""
        self.help.add_topic(name, short, echo(long), *aliases)

    def add_help_topic_callback(self, name: str, short: str, long_callback: Callable[[], str]) -> None:
        """Like add_help_topic, with the full text computed when shown."""
        self.help.add_topic(name, short, long_callback)

    # -------------------------------------------------------------------------
    # Description
    # -------------------------------------------------------------------------

    def describe_commands(self, simple: bool) -> str:
        """One line per registered subcommand, sorted, deprecated ones hidden."""
        line_format = "    {name:<{width}} - {purpose}"
        output_format = "commands:\n{}"
        if simple:
            line_format = "{name:<{width}}  {purpose}"
            output_format = "{}"

        names = sorted(self.subcmds.names())
        longest = max((len(name) for name in names), default=0)
        lines = []
        for name in names:
            action = self.subcmds.lookup(name)
            if action.replacement:
                continue
            lines.append(line_format.format(name=name, width=longest, purpose=action.summary()))
        return output_format.format("\n".join(lines))

    def info(self) -> Info:
        """Info of the selected subcommand, or of the SuperCommand itself."""
        if self.action is not None:
            info = self.action.info()
            return Info(
                name=f"{self.name} {info.name}",
                args=info.args,
                purpose=info.purpose,
                doc=info.doc,
                aliases=list(info.aliases),
            )
        return self.own_info()

    def own_info(self) -> Info:
        doc_parts = []
        doc = self.doc.strip()
        if doc:
            doc_parts.append(doc)
        doc_parts.append(self.describe_commands(simple=False))
        return Info(
            name=self.name,
            args="<command> ...",
            purpose=self.purpose,
            doc="\n\n".join(doc_parts),
            aliases=list(self.aliases),
        )

    # -------------------------------------------------------------------------
    # Flags
    # -------------------------------------------------------------------------

    def set_common_flags(self, f: FlagSet) -> None:
        """
        Declare the flags shared with subcommands on f.

        A private copy is kept in commonflags; leaf subcommands declare their
        own flags into it, so flags added to f afterwards do not carry into
        subcommands.
        """
        self._declare_common_flags(f)
        self.commonflags = FlagSet(self.name)
        self._common = []
        f.visit_all(self._keep_common)

    def _keep_common(self, flag: Flag) -> None:
        self.commonflags.var(flag)
        self._common.append(flag)

    def _declare_common_flags(self, f: FlagSet) -> None:
        if self.log is not None:
            self.log.add_flags(f)
        f.bool_var(self, "show_help", "h", False, HELP_PURPOSE)
        f.bool_var(self, "show_help", "help", False, "")
        # Plugins must support --description so "help plugins" can list them.
        f.bool_var(self, "show_description", "description", False, "show a short description and exit")

    def set_flags(self, f: FlagSet) -> None:
        self.set_common_flags(f)
        # Only the common flags above are passed on to subcommands.
        if self.version:
            f.bool_var(self, "show_version", "version", False, "show the command's version and exit")
        self.flags = f

    def common_flag_set(self) -> FlagSet:
        """A fresh FlagSet sharing the common flags, for display."""
        f = FlagSet(self.name)
        if self.commonflags is None:
            self._declare_common_flags(f)
        else:
            for flag in self._common:
                f.var(flag)
        return f

    def usage_flags(self) -> FlagSet:
        return self.flags if self.flags is not None else self.common_flag_set()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self, args: List[str]) -> None:
        """Select and initialize the subcommand named by args[0]."""
        if self.commonflags is None:
            self.set_common_flags(FlagSet(self.name))

        if self.show_description:
            check_empty(args)
            return
        if not args:
            self.action = self.subcmds.lookup()
            self.action.init([])
            return

        name, args = args[0], args[1:]
        action = self.subcmds.lookup(name)
        if action is None:
            if self.missing_callback is None:
                raise UnrecognizedCommand(f"{self.name} {name}")
            # The missing command is not initialized; it runs with the raw args.
            self.action = new_action_from_command(MissingCommand(
                callback=self.missing_callback,
                super_name=self.name,
                name=name,
                args=args,
            ))
            return

        self.action = action
        subcmd = action.command
        if subcmd.is_super_command():
            subcmd.set_flags(FlagSet(self.info().name))
        else:
            subcmd.set_flags(self.commonflags)
        self.commonflags.parse(subcmd.allow_interspersed_flags(), args)
        args = self.commonflags.args()

        if self.show_help:
            # "cmd --help" behaves like "help cmd".
            args = [self.action.name]
            self.action = self.subcmds.lookup("help")

        self.action.init(args)

    def run(self, ctx: Context) -> None:
        """Run the subcommand selected by init()."""
        if self.show_description:
            if self.purpose:
                ctx.stdout.write(f"{self.purpose}\n")
            else:
                ctx.stdout.write(f"{self.info().name}: no description available\n")
            return

        try:
            if self.action is None:
                raise RegistryError("no action selected")
            self.action.validate()
        except RegistryError as err:
            raise RuntimeError("Run: missing subcommand; Init failed or not called") from err

        self._pre_run(ctx)
        self._run(ctx)

    def _pre_run(self, ctx: Context) -> None:
        if self.log is not None:
            self.log.start(ctx)
        if self.notify_run is not None:
            name = self.name
            if self.usage_prefix and self.usage_prefix != name:
                name = f"{self.usage_prefix} {name}"
            self.notify_run(name)
        self.action.pre_run(ctx)

    def _run(self, ctx: Context) -> None:
        try:
            self.action.run(ctx)
        except (SilentError, RcPassthroughError):
            raise
        except Exception as err:
            logger.error("%s", err)
            # Logged here; main() must not report it again.
            raise SilentError() from err
        logger.info("command finished")

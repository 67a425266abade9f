"""
HelpCommand -- The default action of every SuperCommand

    help                 usage of the super-command (or the "basics" topic)
    help <command>       help for a registered subcommand
    help <topic>         a registered help topic
    help <other> [args]  delegated to the missing command handler with --help
"""

import dataclasses
from typing import TYPE_CHECKING, List

from ..errors import CommandError
from .command import CommandBase, Context, Info
from .flags import FlagSet
from .missing import MissingCommand
from .topics import Topic, Topics
from .version import VersionCommand

if TYPE_CHECKING:
    from .supercommand import SuperCommand

HELP_PURPOSE = "show help on a command or other topic"

GLOBAL_OPTIONS_HEADER = """Global Options

These options may be used with any command, and may appear in front of any
command.

"""


class HelpCommand(CommandBase):
    """Shows help for the owning super-command, its subcommands and topics."""

    def __init__(self, super_command: "SuperCommand"):
        self.super = super_command
        self.topic = ""
        self.topic_args: List[str] = []
        self.topics = Topics(
            Topic("commands", "Basic help for all commands",
                  lambda: self.super.describe_commands(simple=True)),
            Topic("global-options", "Options common to all commands", self.global_options),
            Topic("topics", "Topic list", self.topic_list),
        )

    def info(self) -> Info:
        return Info(
            name="help",
            args="[topic]",
            purpose=HELP_PURPOSE,
            doc="See also: topics",
        )

    def init(self, args: List[str]) -> None:
        if not args:
            return
        self.topic = args[0]
        if len(args) > 1:
            if self.super.missing_callback is None:
                raise CommandError(f"extra arguments to command help: {args[1:]!r}")
            self.topic_args = args[1:]

    def run(self, ctx: Context) -> None:
        if self.super.show_version:
            VersionCommand(self.super.version).run(ctx)
            return

        topic = self.topic
        if not topic:
            if self.topics.lookup("basics") is None:
                ctx.stdout.write(self.super.own_info().help(self.super.common_flag_set()))
                return
            topic = "basics"

        action = self.super.subcmds.lookup(topic)
        if action is not None:
            info = dataclasses.replace(action.info())
            info.name = f"{self.super.name} {info.name}"
            flags = FlagSet(info.name)
            action.command.set_flags(flags)
            ctx.stdout.write(info.help(flags))
            return

        found = self.topics.lookup(topic)
        if found is not None:
            ctx.stdout.write(found.long().strip() + "\n")
            return

        if self.super.missing_callback is not None:
            missing = MissingCommand(
                callback=self.super.missing_callback,
                super_name=self.super.name,
                name=topic,
                args=["--help"] + self.topic_args,
            )
            missing.run(ctx)
            return

        raise CommandError(f"unknown command or topic for {topic}")

    def add_topic(self, name: str, short: str, long, *aliases: str) -> None:
        self.topics.add_with_aliases(Topic(name, short, long, list(aliases)))

    def global_options(self) -> str:
        return GLOBAL_OPTIONS_HEADER + self.super.common_flag_set().format_defaults()

    def topic_list(self) -> str:
        names = sorted(self.topics.names_without_aliases())
        longest = max((len(name) for name in names), default=0)
        return "\n".join(
            f"{name:<{longest}}  {self.topics.lookup(name).short}" for name in names
        )

"""
Core -- Commands, registry and super-command dispatch

- command: the Command contract, Info, Context
- flags: shareable FlagSet backed by argparse
- registry: Action and the alias-aware Registry
- supercommand: SuperCommand, the recursive dispatcher
- missing: deferred handling of unknown subcommands
- help / topics / version: built-in help and version commands
- log: the logging target started before a subcommand runs
- main: run a command and return a process exit code
"""

from .command import Command, CommandBase, Context, Info, check_empty, default_context, zero_or_one_args
from .flags import Flag, FlagSet
from .help import HelpCommand
from .log import Log, configure_loggers, parse_logging_config
from .main import main
from .missing import MissingCallback, MissingCommand
from .registry import Action, DeprecationCheck, Registry, new_action_from_command
from .supercommand import SuperCommand, SuperCommandParams
from .topics import Topic, Topics
from .version import VersionCommand

__all__ = [
    'Command', 'CommandBase', 'Context', 'Info', 'check_empty', 'default_context', 'zero_or_one_args',
    'Flag', 'FlagSet',
    'HelpCommand',
    'Log', 'configure_loggers', 'parse_logging_config',
    'main',
    'MissingCallback', 'MissingCommand',
    'Action', 'DeprecationCheck', 'Registry', 'new_action_from_command',
    'SuperCommand', 'SuperCommandParams',
    'Topic', 'Topics',
    'VersionCommand',
]

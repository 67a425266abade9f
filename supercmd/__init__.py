"""
supercmd -- Composable command-line super-commands with plugins

Build one executable out of many subcommands:
- SuperCommand dispatches to registered subcommands, recursively
- subcommands can have aliases and be deprecated or made obsolete
- unknown subcommands can be delegated to "<prefix><name>" executables
- help, help topics, version and logging flags come built in

Usage:
    supercmd help
    supercmd help commands
    supercmd help plugins
    supercmd config --set plugins.prefix=mytool-
    supercmd <plugin> [args...]
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    CommandError, FlagError, HelpRequested, RcPassthroughError, RegistryError,
    SilentError, UnrecognizedCommand, is_rc_passthrough_error,
)

# Core layer
from .core.command import Command, CommandBase, Context, Info, check_empty, default_context, zero_or_one_args
from .core.flags import Flag, FlagSet
from .core.log import Log
from .core.main import main
from .core.registry import Action, DeprecationCheck, Registry
from .core.supercommand import SuperCommand, SuperCommandParams

# Plugins layer
from .plugins import DESCRIPTION_FLAG, PluginCommand, Plugins

# Configuration
from .config import Config, ConfigManager, get_config

__all__ = [
    '__version__',
    # Errors
    'CommandError', 'FlagError', 'HelpRequested', 'RcPassthroughError', 'RegistryError',
    'SilentError', 'UnrecognizedCommand', 'is_rc_passthrough_error',
    # Core
    'Command', 'CommandBase', 'Context', 'Info', 'check_empty', 'default_context', 'zero_or_one_args',
    'Flag', 'FlagSet', 'Log', 'main',
    'Action', 'DeprecationCheck', 'Registry',
    'SuperCommand', 'SuperCommandParams',
    # Plugins
    'DESCRIPTION_FLAG', 'PluginCommand', 'Plugins',
    # Config
    'Config', 'ConfigManager', 'get_config',
]

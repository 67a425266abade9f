"""
supercmd CLI -- The host executable

Wires the pieces together: configuration, logging flags, the built-in
commands and plugin delegation for every unknown subcommand.
"""

import sys
from typing import List, Optional

from . import __version__
from .commands import register_all
from .config import ConfigManager
from .core.command import default_context
from .core.log import Log
from .core.main import main as run_main
from .core.supercommand import SuperCommand, SuperCommandParams
from .plugins import Plugins

CLI_DOC = """
supercmd runs subcommands. Any subcommand it does not know itself is
looked up as a plugin: an executable named "<prefix><subcommand>" on PATH.
See "supercmd help plugins" for the plugins found.
"""


def new_super_command(manager: Optional[ConfigManager] = None) -> SuperCommand:
    """Build the supercmd SuperCommand from configuration."""
    manager = manager or ConfigManager()
    config = manager.load()
    plugins = Plugins.from_config(config.plugins)

    command = SuperCommand(SuperCommandParams(
        name="supercmd",
        purpose="run subcommands and plugins",
        doc=CLI_DOC,
        log=Log(default_config=config.logging.config, default_path=config.logging.path),
        missing_callback=plugins.run_plugin,
        version=__version__,
    ))
    command.add_help_topic_callback("plugins", "show the available plugins", plugins.help_topic)
    register_all(command, manager)
    return command


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the supercmd CLI.

    Returns the process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]
    return run_main(new_super_command(), default_context(), argv)


if __name__ == '__main__':
    sys.exit(main())

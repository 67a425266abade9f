"""
Commands -- Built-in subcommands of the supercmd host with self-registration

Each command module exports new_command(manager) returning a Command.
register_all() imports every module in COMMAND_MODULES and registers the
command it builds, so adding a command means adding a module to the list.
"""

import importlib
import logging
from typing import List

from ..config import ConfigManager
from ..core.supercommand import SuperCommand

logger = logging.getLogger(__name__)

# Command modules that participate in auto-registration
# Order determines registration order
COMMAND_MODULES = [
    'config_cmd',
]


def register_all(super_command: SuperCommand, manager: ConfigManager) -> List[str]:
    """
    Register the built-in commands on super_command.

    Args:
        super_command: The host SuperCommand
        manager: Configuration manager handed to every command

    Returns:
        Names of the registered commands
    """
    registered = []
    for module_name in COMMAND_MODULES:
        try:
            module = importlib.import_module(f'.{module_name}', __package__)
        except ImportError as e:
            # Degrade gracefully: the other commands still work
            logger.warning("could not load command module '%s': %s", module_name, e)
            continue

        if hasattr(module, 'new_command'):
            command = module.new_command(manager)
            super_command.register(command)
            registered.append(command.info().name)
    return registered


__all__ = ['COMMAND_MODULES', 'register_all']

"""
ConfigCommand -- View or change the supercmd configuration

    supercmd config                          show the effective configuration
    supercmd config --set plugins.prefix=x-  change a setting in the user config
"""

from ..config import ConfigManager
from ..core.command import CommandBase, Context, Info
from ..core.flags import FlagSet
from ..errors import CommandError

CONFIG_DOC = """
Without options the effective configuration is shown: defaults, overridden
by the user config file, overridden by SUPERCMD_* environment variables.

Settings:
  logging.config        default for --logging-config
  logging.path          default for --log-file
  plugins.prefix        executable prefix for plugins
  plugins.title         title of the "help plugins" topic
  plugins.ignored_flags comma-separated host flags accepted by plugins
  plugins.env           comma-separated NAME=value entries for plugins
"""


class ConfigCommand(CommandBase):
    """Shows or sets configuration values."""

    def __init__(self, manager: ConfigManager):
        self.manager = manager
        self.assignment = ""

    def info(self) -> Info:
        return Info(
            name="config",
            purpose="view or set configuration",
            doc=CONFIG_DOC,
        )

    def set_flags(self, f: FlagSet) -> None:
        f.string_var(self, "assignment", "set", "",
                     "set config value (e.g., plugins.prefix=mytool-)")

    def run(self, ctx: Context) -> None:
        if not self.assignment:
            ctx.stdout.write(self.manager.display() + "\n")
            return

        if '=' not in self.assignment:
            raise CommandError("use format KEY=VALUE (e.g., plugins.prefix=mytool-)")
        key, value = self.assignment.split('=', 1)
        error = self.manager.set(key, value)
        if error:
            raise CommandError(error)
        ctx.infof("Set %s = %s", key, value)


def new_command(manager: ConfigManager) -> ConfigCommand:
    return ConfigCommand(manager)

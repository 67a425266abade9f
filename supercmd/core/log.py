"""
Log -- Logging target started by a SuperCommand before it runs a subcommand

Declares the common logging flags and, on start(), configures the standard
logging module for the invocation:
- without --show-log only warnings and errors reach stderr, as "LEVEL message"
- --show-log writes the full log to stderr at INFO
- --debug writes the full log to stderr at DEBUG
- --log-file additionally appends the log, from INFO up, to a file
- --logging-config overrides levels per logger: "<root>=INFO;supercmd.plugins=DEBUG"
"""

import logging
from typing import List

from ..errors import CommandError
from .command import Context
from .flags import FlagSet

FULL_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
WARNING_FORMAT = "%(levelname)s %(message)s"

ROOT_NAME = "<root>"


class Log:
    """Command-line controlled logging configuration."""

    def __init__(self, default_config: str = "", default_path: str = ""):
        self.default_config = default_config
        self.default_path = default_path
        self.path = default_path
        self.verbose = False
        self.quiet = False
        self.debug = False
        self.show_log = False
        self.config = default_config
        self._handlers: List[logging.Handler] = []

    def add_flags(self, f: FlagSet) -> None:
        f.string_var(self, "path", "log-file", self.default_path, "path to write log to")
        f.bool_var(self, "verbose", "v", False, "show more verbose output")
        f.bool_var(self, "verbose", "verbose", False, "show more verbose output")
        f.bool_var(self, "quiet", "q", False, "show no informational output")
        f.bool_var(self, "quiet", "quiet", False, "show no informational output")
        f.bool_var(self, "debug", "debug", False,
                   "equivalent to --show-log --logging-config=<root>=DEBUG")
        f.string_var(self, "config", "logging-config", self.default_config,
                     "specify log levels for modules")
        f.bool_var(self, "show_log", "show-log", False, "if set, write the log file to stderr")

    def start(self, ctx: Context) -> None:
        """Configure logging according to the parsed flags."""
        if self.verbose and self.quiet:
            raise CommandError('"verbose" and "quiet" flags clash, please use one or the other, not both')
        ctx.quiet = self.quiet
        ctx.verbose = self.verbose

        root = logging.getLogger()
        self.stop()

        if self.path:
            try:
                handler = logging.FileHandler(ctx.abs_path(self.path))
            except OSError as err:
                raise CommandError(f"cannot open log file: {err}") from err
            handler.setFormatter(logging.Formatter(FULL_FORMAT))
            self._install(root, handler)

        level = logging.WARNING
        if self.show_log or self.path:
            level = logging.INFO
        if self.debug:
            self.show_log = True
            level = logging.DEBUG

        handler = logging.StreamHandler(ctx.stderr)
        if self.show_log:
            handler.setFormatter(logging.Formatter(FULL_FORMAT))
        else:
            handler.setLevel(logging.WARNING)
            handler.setFormatter(logging.Formatter(WARNING_FORMAT))
        self._install(root, handler)

        root.setLevel(level)
        configure_loggers(self.config)

    def stop(self) -> None:
        """Remove the handlers installed by a previous start()."""
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []

    def _install(self, root: logging.Logger, handler: logging.Handler) -> None:
        root.addHandler(handler)
        self._handlers.append(handler)


def parse_logging_config(spec: str) -> List[tuple]:
    """
    Parse "name=LEVEL;other=LEVEL" into (logger_name, level) pairs.

    "<root>" names the root logger. Raises CommandError on malformed input.
    """
    pairs = []
    for entry in spec.replace(":", ";").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, level_name = entry.partition("=")
        name = name.strip()
        level_name = level_name.strip().upper()
        if not sep or not name:
            raise CommandError(f'logger specification expected "=", found "{entry}"')
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise CommandError(f'unknown severity level "{level_name}"')
        pairs.append(("" if name == ROOT_NAME else name, level))
    return pairs


def configure_loggers(spec: str) -> None:
    """Apply a logging-config specification to the logging module."""
    for name, level in parse_logging_config(spec):
        logging.getLogger(name or None).setLevel(level)

"""
Plugins -- External executables as first-class subcommands

A plugin is any executable on PATH named "<prefix><subcommand>". The
protocol is small:
- "<prefix>foo --description" prints one line describing foo and exits 0
- "<prefix>foo args..." does the work; its exit status is passed through
  to the caller unchanged

Plugins.run_plugin is meant to be a SuperCommand's missing callback, so any
unknown subcommand is looked up as a plugin.
"""

import logging
import os
import subprocess
import types
from typing import Dict, List, Optional

from ..core.command import CommandBase, Context, Info
from ..core.flags import FlagSet
from ..errors import CommandError, RcPassthroughError, UnrecognizedCommand
from ..orchestrator import IOPool, ResultAggregator, io_task

logger = logging.getLogger(__name__)

DESCRIPTION_FLAG = "--description"

PLUGIN_TOPIC_TEXT = """{title}

Plugins are implemented as stand-alone executable files somewhere
in the user's PATH. The executable command must be of the format
"{prefix}<plugin name>".

"""


class Plugins:
    """The plugins supported by a super-command."""

    def __init__(self, prefix: str, title: str, ignored_flags: Optional[List[str]] = None,
                 env: Optional[List[str]] = None):
        """
        Args:
            prefix: Executable filename prefix for plugins
            title: Title of the plugins help topic
            ignored_flags: Flags taking a value that the host also accepts
            env: Extra environment for plugins, "NAME=value" entries
        """
        self.prefix = prefix
        self.title = title
        self.ignored_flags = list(ignored_flags or [])
        self.env = list(env or [])

    @classmethod
    def from_config(cls, config) -> "Plugins":
        """Build from a PluginConfig."""
        return cls(
            prefix=config.prefix,
            title=config.title,
            ignored_flags=config.ignored_flags,
            env=config.env,
        )

    # -------------------------------------------------------------------------
    # Invocation
    # -------------------------------------------------------------------------

    def run_plugin(self, ctx: Context, subcommand: str, args: List[str]) -> None:
        """Run "<prefix><subcommand> args..."; usable as a MissingCallback."""
        plugin = PluginCommand(self.prefix + subcommand, self.env, self.ignored_flags)

        # Only the ignored flags are parsed here; everything else is the
        # plugin's business and would confuse the parser.
        flags = FlagSet(plugin.name)
        plugin.set_flags(flags)
        flags.parse(False, self.extract_ignored_args(args))

        plugin.init(args)
        try:
            plugin.run(ctx)
        except UnrecognizedCommand:
            raise UnrecognizedCommand(subcommand) from None

    def extract_ignored_args(self, args: List[str]) -> List[str]:
        """Pick the ignored flags and their values out of args."""
        ignored = []
        index = 0
        while index < len(args):
            arg = args[index]
            index += 1
            if arg in self.ignored_flags:
                ignored.append(arg)
                if index < len(args):
                    ignored.append(args[index])
                    index += 1
        return ignored

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def find_all(self, path: Optional[List[str]] = None) -> List[str]:
        """
        Names of executables starting with the prefix, sorted.

        path defaults to the directories of $PATH. A name found in several
        directories is reported once per directory.
        """
        if path is None:
            path = os.environ.get("PATH", "").split(os.pathsep)

        plugins = []
        for directory in path:
            try:
                entries = list(os.scandir(directory))
            except OSError:
                continue
            for entry in entries:
                if not entry.name.startswith(self.prefix):
                    continue
                try:
                    mode = entry.stat(follow_symlinks=False).st_mode
                except OSError:
                    continue
                if mode & 0o111:
                    plugins.append(entry.name)
        plugins.sort()
        return plugins

    def descriptions(self) -> Dict[str, str]:
        """
        Run every plugin with --description, all at once.

        Returns a mapping of plugin name (prefix stripped) to the first line
        of its output. A plugin that fails gets a fixed error description
        instead; the failure itself is logged. The call returns only when
        every plugin has answered.
        """
        plugins = self.find_all()
        if not plugins:
            return {}

        # Every probe must be running at the same time: a plugin may wait
        # on another one before it answers.
        aggregator = ResultAggregator(capacity=len(plugins))
        with IOPool(max_workers=len(plugins), aggregator=aggregator,
                    thread_name_prefix="supercmd-describe-") as pool:
            for plugin in plugins:
                pool.submit(io_task(fn=_describe, args=(plugin,), name=plugin))

            results = {}
            for result in aggregator.collect(len(plugins)):
                plugin = result.name
                if result.success:
                    description = result.result
                else:
                    description = f"error occurred running '{plugin} {DESCRIPTION_FLAG}'"
                    logger.error("'%s %s': %s", plugin, DESCRIPTION_FLAG, result.error)
                results[plugin[len(self.prefix):]] = description
        return results

    def help_topic(self) -> str:
        """Help topic text listing the available plugins."""
        output = PLUGIN_TOPIC_TEXT.format(title=self.title, prefix=self.prefix)

        existing = self.descriptions()
        if not existing:
            return output + "No plugins found.\n"

        longest = max(len(name) for name in existing)
        for name in sorted(existing):
            output += f"{name:<{longest}}  {existing[name]}\n"
        return output


def _describe(plugin: str) -> str:
    """First line of "<plugin> --description"; raises on failure."""
    completed = subprocess.run(
        [plugin, DESCRIPTION_FLAG],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        check=True,
    )
    output = completed.stdout.decode(errors="replace")
    return output.split("\n", 1)[0]


class PluginCommand(CommandBase):
    """Runs a plugin executable with the caller's streams attached."""

    def __init__(self, name: str, env: Optional[List[str]] = None,
                 ignored_flags: Optional[List[str]] = None):
        self.name = name
        self.env = list(env or [])
        self.ignored_flags = list(ignored_flags or [])
        self.ignored_values = types.SimpleNamespace()
        self.args: List[str] = []

    def info(self) -> Info:
        return Info(name=self.name, args="[args...]", purpose=f"run the {self.name} plugin")

    def set_flags(self, f: FlagSet) -> None:
        # Accept the host's value flags so they can be parsed out of the
        # plugin's arguments; their values stay visible to the plugin too.
        for flag in self.ignored_flags:
            name = flag.lstrip("-")
            if name and f.lookup(name) is None:
                f.string_var(self.ignored_values, name.replace("-", "_"), name, "", f"passed through to {self.name}")

    def init(self, args: List[str]) -> None:
        self.args = list(args)

    def run(self, ctx: Context) -> None:
        env = dict(os.environ)
        for entry in self.env:
            key, _, value = entry.partition("=")
            env[key] = value

        logger.debug("running plugin %s %s (host flags %s)", self.name, self.args, vars(self.ignored_values))
        returncode = _run_attached(ctx, [self.name] + self.args, env)
        if returncode is None:
            raise UnrecognizedCommand(self.name)
        if returncode > 0:
            raise RcPassthroughError(returncode)
        if returncode < 0:
            raise CommandError(f"{self.name} terminated by signal {-returncode}")


def _has_fileno(stream) -> bool:
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True


def _run_attached(ctx: Context, argv: List[str], env: Dict[str, str]) -> Optional[int]:
    """
    Run argv to completion with ctx's streams as its standard streams.

    Streams backed by a file descriptor are handed to the child directly;
    in-memory streams are fed and collected through pipes. Returns the exit
    status, or None when the executable cannot be started.
    """
    streams = {}
    for name in ("stdin", "stdout", "stderr"):
        stream = getattr(ctx, name)
        if _has_fileno(stream):
            if name != "stdin":
                stream.flush()
            streams[name] = stream
        else:
            streams[name] = subprocess.PIPE

    try:
        process = subprocess.Popen(argv, env=env, **streams)
    except OSError as err:
        logger.debug("cannot start %s: %s", argv[0], err)
        return None

    # Bytes on the pipes: a plugin's output need not be valid UTF-8.
    feed = None
    if streams["stdin"] is subprocess.PIPE:
        feed = ctx.stdin.read() if ctx.stdin is not None else ""
        if isinstance(feed, str):
            feed = feed.encode()
    stdout, stderr = process.communicate(feed)
    if stdout:
        ctx.stdout.write(stdout.decode(errors="replace"))
    if stderr:
        ctx.stderr.write(stderr.decode(errors="replace"))
    return process.returncode

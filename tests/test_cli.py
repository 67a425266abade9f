"""
Tests for the supercmd CLI -- Host wiring of config, commands and plugins

Tests verify:
- The host registers built-in commands and the plugins help topic
- Unknown subcommands run as plugins with the configured prefix
- main() returns exit codes instead of exiting
"""

import pytest

from supercmd import __version__
from supercmd.cli import main, new_super_command
from supercmd.config import ConfigManager
from supercmd.core.main import main as run_main


@pytest.fixture
def host(config_manager):
    return new_super_command(config_manager)


class TestHost:
    """Test the assembled super-command."""

    def test_builtin_commands(self, host):
        names = host.subcmds.names()

        assert "config" in names
        assert "help" in names
        assert "version" in names

    def test_plugins_topic_registered(self, host):
        assert host.help.topics.lookup("plugins") is not None

    def test_version(self, host, ctx):
        assert run_main(host, ctx, ["version"]) == 0
        assert ctx.stdout.getvalue() == f"{__version__}\n"

    def test_help_lists_commands(self, host, ctx):
        assert run_main(host, ctx, ["help", "commands"]) == 0
        # Names are padded to the longest one, "version".
        assert "config   view or set configuration" in ctx.stdout.getvalue().splitlines()

    def test_runs_plugin(self, config_manager, plugin_factory, ctx):
        plugin_factory.add("hello")
        host = new_super_command(config_manager)

        assert run_main(host, ctx, ["hello", "world"]) == 0
        assert ctx.stdout.getvalue() == "hello world\n"

    def test_configured_prefix(self, config_manager, plugin_factory, ctx, monkeypatch):
        monkeypatch.setenv("SUPERCMD_PLUGIN_PREFIX", "tool-")
        script = plugin_factory.root / "tool-hello"
        script.write_text("#!/bin/sh\necho tool $*\n")
        script.chmod(0o755)
        host = new_super_command(ConfigManager(config_dir=config_manager.config_dir))

        assert run_main(host, ctx, ["hello", "there"]) == 0
        assert ctx.stdout.getvalue() == "tool there\n"

    def test_help_plugins(self, config_manager, plugin_factory, ctx):
        plugin_factory.add_full("hello")
        host = new_super_command(config_manager)

        assert run_main(host, ctx, ["help", "plugins"]) == 0
        output = ctx.stdout.getvalue()
        assert output.startswith("Plugins\n")
        assert output.endswith("hello  hello description\n")


class TestMain:
    """Test the console entry point."""

    def test_version_flag(self, config_manager, monkeypatch, capsys):
        monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", config_manager.config_dir)

        assert main(["--version"]) == 0
        assert capsys.readouterr().out == f"{__version__}\n"

    def test_unknown_flag(self, config_manager, monkeypatch, capsys):
        monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", config_manager.config_dir)

        assert main(["--no-such-flag"]) == 2
        assert capsys.readouterr().err.startswith("error: ")

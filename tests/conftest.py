"""
Shared pytest fixtures for the supercmd test suite.

Usage in tests:
    def test_something(ctx):
        code = main(command, ctx, [])
        assert stdout(ctx) == ""

    def test_plugins(plugin_factory, plugins):
        plugin_factory.add("foo")
        plugins.run_plugin(ctx, "foo", [])
"""

import logging
import os
import sys

import pytest

from supercmd.config import ConfigManager
from supercmd.plugins import Plugins
from tests.factories import PluginFactory, make_context


@pytest.fixture(autouse=True)
def restore_logging():
    """
    Restore root logger handlers and levels after each test.

    Log.start() reconfigures the logging module for the whole process.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    for name in ("supercmd", "supercmd.plugins", "foo", "foo.bar"):
        logging.getLogger(name).setLevel(logging.NOTSET)


@pytest.fixture
def ctx(tmp_path):
    """Context with in-memory streams."""
    return make_context(tmp_path)


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    """ConfigManager using a temp directory and no SUPERCMD_* overrides."""
    for name in ("SUPERCMD_LOGGING_CONFIG", "SUPERCMD_LOG_FILE", "SUPERCMD_PLUGIN_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    return ConfigManager(config_dir=tmp_path / "config")


@pytest.fixture
def plugin_factory(tmp_path, monkeypatch):
    """
    PluginFactory whose directory is the only plugin directory on PATH.

    /bin and /usr/bin stay on PATH so the scripts can run.
    """
    if sys.platform == "win32":
        pytest.skip("plugin tests use POSIX shell scripts")
    factory = PluginFactory(tmp_path / "plugins")
    monkeypatch.setenv("PATH", os.pathsep.join([str(factory.root), "/bin", "/usr/bin"]))
    return factory


@pytest.fixture
def plugins(plugin_factory):
    """Plugins with the factory's prefix, accepting -e with a value."""
    return Plugins(prefix=plugin_factory.prefix, title="Supercmd Plugins", ignored_flags=["-e"])

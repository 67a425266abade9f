"""
Tests for Config -- Layered YAML configuration

These tests validate:
- Config hierarchy (env > user file > defaults)
- Section validation
- set/get round trips through the user file
- Malformed files fall back to defaults
"""

import pytest
import yaml

from supercmd.config import (
    Config, ConfigManager, LoggingConfig, PluginConfig,
    DEFAULT_PLUGIN_PREFIX, DEFAULT_PLUGIN_TITLE, get_config,
)


class TestSections:
    """Section validation."""

    def test_plugin_defaults(self):
        config = PluginConfig()
        assert config.prefix == DEFAULT_PLUGIN_PREFIX
        assert config.title == DEFAULT_PLUGIN_TITLE
        assert config.validate() is None

    def test_empty_prefix_invalid(self):
        assert "must not be empty" in PluginConfig(prefix="").validate()

    def test_env_entry_needs_equals(self):
        assert "NAME=value" in PluginConfig(env=["JUST_A_NAME"]).validate()

    def test_ignored_flag_needs_dash(self):
        assert "Invalid ignored flag" in PluginConfig(ignored_flags=["m"]).validate()

    def test_logging_config_valid(self):
        assert LoggingConfig(config="<root>=DEBUG;supercmd=INFO").validate() is None

    def test_logging_config_invalid(self):
        error = LoggingConfig(config="supercmd").validate()
        assert error is not None
        assert "Invalid logging config" in error


class TestConfig:
    """Serialization."""

    def test_round_trip(self):
        config = Config(
            logging=LoggingConfig(config="<root>=INFO", path="supercmd.log"),
            plugins=PluginConfig(prefix="x-", title="X", ignored_flags=["-m"], env=["A=1"]),
        )

        assert Config.from_dict(config.to_dict()) == config

    def test_from_empty_dict(self):
        assert Config.from_dict({}) == Config()


class TestConfigManager:
    """Loading, overrides and persistence."""

    def test_defaults_without_file(self, config_manager):
        assert config_manager.load() == Config()

    def test_user_file(self, config_manager):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.user_config_path.write_text(yaml.dump({"plugins": {"prefix": "mine-"}}))

        assert config_manager.load().plugins.prefix == "mine-"

    def test_env_overrides_file(self, config_manager, monkeypatch):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.user_config_path.write_text(yaml.dump({"plugins": {"prefix": "mine-"}}))
        monkeypatch.setenv("SUPERCMD_PLUGIN_PREFIX", "env-")
        monkeypatch.setenv("SUPERCMD_LOG_FILE", "/tmp/supercmd.log")
        monkeypatch.setenv("SUPERCMD_LOGGING_CONFIG", "<root>=DEBUG")

        config = config_manager.load()
        assert config.plugins.prefix == "env-"
        assert config.logging.path == "/tmp/supercmd.log"
        assert config.logging.config == "<root>=DEBUG"

    def test_malformed_file(self, config_manager, caplog):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.user_config_path.write_text("plugins: [unclosed\n")

        assert config_manager.load() == Config()
        assert "ignoring malformed config" in caplog.text

    def test_file_not_a_mapping(self, config_manager):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.user_config_path.write_text("- just\n- a list\n")

        assert config_manager.load() == Config()

    def test_set_and_get(self, config_manager):
        assert config_manager.set("plugins.prefix", "tool-") is None
        assert config_manager.get("plugins.prefix") == "tool-"

        saved = yaml.safe_load(config_manager.user_config_path.read_text())
        assert saved["plugins"]["prefix"] == "tool-"

    def test_set_list(self, config_manager):
        assert config_manager.set("plugins.ignored_flags", "-m, --model") is None
        assert config_manager.load().plugins.ignored_flags == ["-m", "--model"]
        assert config_manager.get("plugins.ignored_flags") == "-m,--model"

    def test_set_persists_across_managers(self, config_manager):
        config_manager.set("logging.path", "out.log")

        fresh = ConfigManager(config_dir=config_manager.config_dir)
        assert fresh.load().logging.path == "out.log"
        assert get_config(config_manager.config_dir).logging.path == "out.log"

    @pytest.mark.parametrize("key,message", [
        ("prefix", "Invalid key format"),
        ("nope.prefix", "Unknown section"),
        ("plugins.nope", "Unknown plugins setting"),
        ("logging.nope", "Unknown logging setting"),
    ])
    def test_set_bad_key(self, config_manager, key, message):
        assert message in config_manager.set(key, "x")

    def test_set_invalid_value_not_saved(self, config_manager):
        assert "Invalid logging config" in config_manager.set("logging.config", "broken")
        assert not config_manager.user_config_path.exists()

    def test_set_invalid_value_not_kept_in_memory(self, config_manager):
        config_manager.set("plugins.prefix", "tool-")

        assert "must not be empty" in config_manager.set("plugins.prefix", "")
        assert config_manager.load().plugins.prefix == "tool-"

    def test_set_does_not_save_env_overrides(self, config_manager, monkeypatch):
        monkeypatch.setenv("SUPERCMD_PLUGIN_PREFIX", "env-")
        monkeypatch.setenv("SUPERCMD_LOG_FILE", "/tmp/supercmd.log")

        assert config_manager.set("plugins.title", "Tools") is None

        saved = yaml.safe_load(config_manager.user_config_path.read_text())
        assert saved["plugins"]["title"] == "Tools"
        assert saved["plugins"]["prefix"] == DEFAULT_PLUGIN_PREFIX
        assert saved["logging"]["path"] == ""
        assert config_manager.load().plugins.prefix == "env-"

    def test_set_keeps_other_user_values(self, config_manager):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.user_config_path.write_text(yaml.dump({"logging": {"path": "mine.log"}}))

        config_manager.set("plugins.prefix", "tool-")

        saved = yaml.safe_load(config_manager.user_config_path.read_text())
        assert saved["logging"]["path"] == "mine.log"
        assert saved["plugins"]["prefix"] == "tool-"

    def test_get_unknown(self, config_manager):
        assert config_manager.get("plugins") is None
        assert config_manager.get("plugins.nope") is None

    def test_display(self, config_manager):
        output = config_manager.display()

        assert "Prefix: supercmd-" in output
        assert "Log file: (none)" in output
        assert str(config_manager.user_config_path) in output

"""
Configuration -- Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. User config (~/.supercmd/config.yaml)
  3. Defaults

Environment variables:
- SUPERCMD_LOGGING_CONFIG: default for --logging-config
- SUPERCMD_LOG_FILE: default for --log-file
- SUPERCMD_PLUGIN_PREFIX: executable prefix for plugins
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core.log import parse_logging_config
from .errors import CommandError

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_PREFIX = "supercmd-"
DEFAULT_PLUGIN_TITLE = "Plugins"


@dataclass
class LoggingConfig:
    """Logging defaults, overridable by flags."""
    config: str = ""  # e.g. "<root>=INFO;supercmd.plugins=DEBUG"
    path: str = ""    # log file, empty = none

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        try:
            parse_logging_config(self.config)
        except CommandError as e:
            return f"Invalid logging config '{self.config}': {e}"
        return None


@dataclass
class PluginConfig:
    """Plugin discovery and invocation settings."""
    prefix: str = DEFAULT_PLUGIN_PREFIX
    title: str = DEFAULT_PLUGIN_TITLE
    # Flags taking a value that may be given to a plugin and are also
    # understood by the host, e.g. ["-m", "--model"]
    ignored_flags: List[str] = field(default_factory=list)
    # Extra environment for plugins, "NAME=value"
    env: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.prefix:
            return "Plugin prefix must not be empty"
        for entry in self.env:
            if "=" not in entry:
                return f"Invalid plugin environment entry '{entry}'. Use NAME=value"
        for flag in self.ignored_flags:
            if not flag.startswith("-"):
                return f"Invalid ignored flag '{flag}'. Flags start with '-'"
        return None


@dataclass
class Config:
    """Application configuration."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    plugins: PluginConfig = field(default_factory=PluginConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "logging": {
                "config": self.logging.config,
                "path": self.logging.path
            },
            "plugins": {
                "prefix": self.plugins.prefix,
                "title": self.plugins.title,
                "ignored_flags": list(self.plugins.ignored_flags),
                "env": list(self.plugins.env)
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        logging_data = data.get("logging") or {}
        plugin_data = data.get("plugins") or {}

        return cls(
            logging=LoggingConfig(
                config=logging_data.get("config") or "",
                path=logging_data.get("path") or ""
            ),
            plugins=PluginConfig(
                prefix=plugin_data.get("prefix") or DEFAULT_PLUGIN_PREFIX,
                title=plugin_data.get("title") or DEFAULT_PLUGIN_TITLE,
                ignored_flags=list(plugin_data.get("ignored_flags") or []),
                env=list(plugin_data.get("env") or [])
            )
        )

    def validate(self) -> Optional[str]:
        return self.logging.validate() or self.plugins.validate()


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. User config (~/.supercmd/config.yaml)
      3. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".supercmd"
    CONFIG_FILE = "config.yaml"

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else self.USER_CONFIG_DIR
        self._config: Optional[Config] = None

    @property
    def user_config_path(self) -> Path:
        return self.config_dir / self.CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data = self._read_user()

        # Environment overrides
        if os.environ.get("SUPERCMD_LOGGING_CONFIG"):
            config_data.setdefault("logging", {})["config"] = os.environ["SUPERCMD_LOGGING_CONFIG"]
        if os.environ.get("SUPERCMD_LOG_FILE"):
            config_data.setdefault("logging", {})["path"] = os.environ["SUPERCMD_LOG_FILE"]
        if os.environ.get("SUPERCMD_PLUGIN_PREFIX"):
            config_data.setdefault("plugins", {})["prefix"] = os.environ["SUPERCMD_PLUGIN_PREFIX"]

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_user(self) -> Dict[str, Any]:
        if not self.user_config_path.exists():
            return {}
        try:
            with open(self.user_config_path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("ignoring malformed config %s: %s", self.user_config_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring malformed config %s: not a mapping", self.user_config_path)
            return {}
        return data

    def save_user(self, config: Config):
        """Save configuration to the user config file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        # Reload on next access so environment overrides apply again
        self._config = None

    def set(self, key: str, value: str) -> Optional[str]:
        """
        Set a configuration value and save it to the user config.

        Only the user file's own values and the new setting are written;
        environment overrides stay out of the file. Nothing changes when
        the new value is invalid.

        Args:
            key: Dot-separated key (e.g., "plugins.prefix")
            value: Value to set; list settings take a comma-separated value

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'plugins.prefix')"

        section, setting = parts

        if section == "logging":
            if setting not in ("config", "path"):
                return f"Unknown logging setting: {setting}. Valid: config, path"
            new_value = value
            error = replace(config.logging, **{setting: new_value}).validate()

        elif section == "plugins":
            if setting not in ("prefix", "title", "ignored_flags", "env"):
                return f"Unknown plugins setting: {setting}. Valid: prefix, title, ignored_flags, env"
            new_value = _split_list(value) if setting in ("ignored_flags", "env") else value
            error = replace(config.plugins, **{setting: new_value}).validate()
        else:
            return f"Unknown section: {section}. Valid: logging, plugins"

        if error:
            return error

        user_data = self._read_user()
        section_data = user_data.get(section)
        if not isinstance(section_data, dict):
            section_data = user_data[section] = {}
        section_data[setting] = new_value

        self.save_user(Config.from_dict(user_data))
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        data = self.load().to_dict()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        value = data.get(section, {}).get(setting)
        if isinstance(value, list):
            return ",".join(value)
        return value

    def display(self) -> str:
        """Format config for display."""
        config = self.load()

        lines = [
            "Configuration:",
            "",
            "Logging:",
            f"  Config: {config.logging.config or '(default)'}",
            f"  Log file: {config.logging.path or '(none)'}",
            "",
            "Plugins:",
            f"  Prefix: {config.plugins.prefix}",
            f"  Title: {config.plugins.title}",
            f"  Ignored flags: {', '.join(config.plugins.ignored_flags) or '(none)'}",
            f"  Environment: {', '.join(config.plugins.env) or '(none)'}",
            "",
            "Config file:",
            f"  User: {self.user_config_path}",
        ]

        return "\n".join(lines)


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Convenience function
def get_config(config_dir: Optional[Path] = None) -> Config:
    """Load configuration."""
    return ConfigManager(config_dir).load()

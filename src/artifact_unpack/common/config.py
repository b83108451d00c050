"""Configuration loader with multi-source support."""

import logging
import os
import toml
from pathlib import Path
from typing import Dict, Any, Optional, Type, TypeVar
import platformdirs
from pydantic import BaseModel


T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)

# Separates nested keys in environment variable names:
# ARTIFACT_UNPACK_EXTRACTION__DEST_DIR -> extraction.dest_dir
ENV_NESTING_SEPARATOR = "__"


class ConfigLoader:
    """Loads configuration from multiple sources with priority.

    Sources, lowest priority first: defaults file, system config,
    user config, environment variables.
    """

    def __init__(self, app_name: str = "artifact-unpack", config_class: Optional[Type[T]] = None) -> None:
        self.app_name = app_name
        self.config_class = config_class
        self._config: Optional[T] = None

    @property
    def env_prefix(self) -> str:
        return f"{self.app_name.upper().replace('-', '_')}_"

    def load(self, defaults_path: Optional[Path] = None) -> T:
        """Load configuration from all sources.

        Args:
            defaults_path: Optional path to a defaults TOML file

        Returns:
            Validated configuration object (or the merged dict when no
            config_class was given)

        Raises:
            FileNotFoundError: If defaults_path is given but does not exist
            toml.TomlDecodeError: If a config file is not valid TOML
            pydantic.ValidationError: If the merged values fail validation
        """
        config_dict = self._load_defaults(defaults_path)

        for source in (self._load_system_config(), self._load_user_config()):
            if source:
                config_dict = self._deep_merge(config_dict, source)

        config_dict = self._apply_env_overrides(config_dict)

        if self.config_class:
            self._config = self.config_class(**config_dict)
        else:
            self._config = config_dict

        return self._config

    def _load_defaults(self, defaults_path: Optional[Path] = None) -> Dict[str, Any]:
        if defaults_path is not None:
            defaults_path = Path(defaults_path)
            if not defaults_path.exists():
                raise FileNotFoundError(f"Config file not found: {defaults_path}")
            logger.debug(f"Loading config from {defaults_path}")
            return toml.load(defaults_path)

        path = Path.cwd() / "config" / "defaults.toml"
        if path.exists():
            logger.debug(f"Loading defaults from {path}")
            return toml.load(path)

        return {}

    def _load_system_config(self) -> Optional[Dict[str, Any]]:
        """Load system-wide configuration."""
        if os.name == "nt":
            system_path = (
                Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData"))
                / self.app_name
                / "config.toml"
            )
        else:
            system_path = Path(f"/etc/{self.app_name}/config.toml")

        if system_path.exists():
            logger.debug(f"Loading system config from {system_path}")
            return toml.load(system_path)

        return None

    def _load_user_config(self) -> Optional[Dict[str, Any]]:
        """Load user-specific configuration."""
        user_config_dir = platformdirs.user_config_dir(appname=self.app_name, appauthor=False)
        user_config_path = Path(user_config_dir) / "config.toml"

        if user_config_path.exists():
            logger.debug(f"Loading user config from {user_config_path}")
            return toml.load(user_config_path)

        logger.debug(f"User config not found at {user_config_path}")
        return None

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Override config with environment variables.

        Values stay strings; the pydantic schema coerces them.
        """
        prefix = self.env_prefix

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            key_path = env_key[len(prefix):].lower().split(ENV_NESTING_SEPARATOR)
            if not all(key_path):
                logger.debug(f"Ignoring malformed config variable {env_key}")
                continue

            current = config
            for part in key_path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[key_path[-1]] = env_value

        return config

    @property
    def config(self) -> T:
        """Get loaded configuration."""
        if self._config is None:
            self._config = self.load()
        return self._config

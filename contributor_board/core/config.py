"""
YAML configuration for the Contributor Board service.

`ConfigurationManager` is a process-wide singleton that reads
`config/<env>.yaml`, where env comes from an explicit argument, the APP_ENV
variable, or `DEFAULT_ENV`. Values are read with dot notation, e.g.
`get("components.image_relay.max_attempts", 3)`.
"""
import logging
import os
import yaml
from typing import Any, Dict, Optional

# contributor_board/core/config.py -> contributor_board/config/
CONFIG_DIR = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "config"))

DEFAULT_ENV = "development"

# Plain stdlib logger: core.logger imports this module, so get_logger() is not available here.
_log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base class for configuration loading failures."""


class ConfigFileNotFoundError(ConfigError):
    """No `<env>.yaml` exists for the requested environment."""


class InvalidYamlError(ConfigError):
    """The environment file is not valid YAML, or its top level is not a mapping."""


class ConfigurationManager:
    """
    Singleton holder of the active environment's settings.

    The first instantiation loads the configuration; later calls return the same
    object. Tests may point the class attribute `CONFIG_DIR` elsewhere and call
    `load_config()` again.
    """
    CONFIG_DIR: str = CONFIG_DIR
    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}
    _current_env: str = ""

    def __new__(cls) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super(ConfigurationManager, cls).__new__(cls)
            # A missing default environment file propagates to the importer.
            cls._instance.load_config()
        return cls._instance

    def load_config(self, env: Optional[str] = None) -> None:
        """
        Replaces the current settings with those of `env`.

        Args:
            env (Optional[str]): Environment name such as "production". Falls back to
                                 APP_ENV, then to DEFAULT_ENV.

        Raises:
            ConfigFileNotFoundError: If `<env>.yaml` is not in CONFIG_DIR.
            InvalidYamlError: If the file cannot be parsed or is not a mapping.
        """
        self._current_env = env or os.getenv("APP_ENV", DEFAULT_ENV)
        path = os.path.join(self.CONFIG_DIR, f"{self._current_env}.yaml")

        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigFileNotFoundError(
                f"Configuration file not found for environment '{self._current_env}' at '{path}'. "
                f"Ensure '{self._current_env}.yaml' exists in the '{self.CONFIG_DIR}' directory."
            )
        except yaml.YAMLError as e:
            raise InvalidYamlError(f"Error parsing YAML in configuration file '{path}': {e}")
        if not isinstance(loaded, dict):
            raise InvalidYamlError(f"Configuration file '{path}' does not contain a valid YAML dictionary.")
        self._config = loaded

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Looks up a dot-separated key ("board.default_title"). Returns `default`
        when any part of the path is missing or runs into a non-mapping value.
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def reload_config(self, env: Optional[str] = None) -> None:
        """Reloads `env`, or the active environment when `env` is None."""
        previous = self._current_env
        self.load_config(env or previous or None)
        _log.info(f"Configuration reloaded: '{previous}' -> '{self._current_env}'.")

    @property
    def current_environment(self) -> str:
        return self._current_env


# Shared instance; importing this module loads the active environment.
config_manager = ConfigurationManager()


def get_config(key: str, default: Optional[Any] = None) -> Any:
    """Shortcut for `config_manager.get(key, default)`."""
    return config_manager.get(key, default)

import os
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from linear_mcp.core.errors import ConfigError

DEFAULT_CONFIG: Dict[str, Any] = {
    "server_name": "linear",
    "linear_api_url": "https://api.linear.app/graphql",
    "linear_api_key": None,
    "request_timeout": 30.0,
    "log_dir": None,
    "log_level": "INFO",
}


class ConfigLoader:
    _instance = None
    _config = None

    def __new__(cls):
        """
        Create a singleton instance of ConfigLoader.
        Loads configuration from YAML file and environment on first instantiation.
        """
        if cls._instance is None:
            instance = super(ConfigLoader, cls).__new__(cls)
            cls._load_config()
            cls._instance = instance
        return cls._instance

    @classmethod
    def _config_path(cls) -> str:
        path = os.environ.get("LINEAR_MCP_CONFIG")
        if path:
            return os.path.abspath(path)
        return os.path.abspath(os.path.join(os.getcwd(), "config.yaml"))

    @classmethod
    def _load_config(cls):
        """
        Merge the YAML file (if any) over DEFAULT_CONFIG, then apply environment overrides.
        """
        load_dotenv(find_dotenv(usecwd=True))
        config = dict(DEFAULT_CONFIG)
        config_path = cls._config_path()
        if os.path.isfile(config_path):
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigError(f"{config_path} must contain a mapping at the top level")
            config.update(loaded)
        env_key = os.environ.get("LINEAR_API_KEY")
        if env_key:
            config["linear_api_key"] = env_key
        cls._config = config

    @classmethod
    def reload(cls) -> "ConfigLoader":
        cls._instance = None
        cls._config = None
        return cls()

    def get_config(self):
        """
        Return the loaded configuration dictionary.
        """
        return self._config


def get_config() -> Dict[str, Any]:
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()


def get_api_key(config: Optional[Dict[str, Any]] = None) -> str:
    cfg = config if config is not None else get_config()
    key = cfg.get("linear_api_key")
    if not key:
        raise ConfigError("LINEAR_API_KEY must be set in the environment or 'linear_api_key' in config.yaml")
    return key

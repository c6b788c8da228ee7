"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: get_config(), reset_config(), ConfigModule.get()
Hidden: Config sources, validation logic, environment parsing

Provider credentials live in browserhub.config.provider; this module holds
everything the server process itself needs.
"""

import os
from typing import Any, Dict

from dotenv import load_dotenv


# Configuration Contract: Required and Optional Keys

REQUIRED_CONFIG_KEYS = {
    "host": "API server bind address",
    "port": "API server port",
    "log_level": "Logging level (DEBUG, INFO, WARNING, ERROR)",
    "registry_backend": "Session registry backend (memory or redis)",
}

OPTIONAL_CONFIG_KEYS = {
    "redis_url": {
        "description": "Redis URL used when registry_backend is redis",
        "default": "redis://localhost:6379/0",
    },
    "static_dir": {
        "description": "Built frontend directory served at / with SPA fallback",
        "default": "dist",
    },
    "cors_origins": {
        "description": "Comma separated list of allowed CORS origins",
        "default": ["*"],
    },
    "debug": {
        "description": "Enable debug mode",
        "default": False,
    },
}

REGISTRY_BACKENDS = ("memory", "redis")


class ConfigModule:
    """Configuration management module."""

    def __init__(self):
        """Initialize with environment variables."""
        load_dotenv()
        self._config = self._load_from_env()
        self._validate_required_keys()

    def _validate_required_keys(self) -> None:
        """
        Validate that all required configuration keys are present.

        Raises:
            ValueError: If required keys are missing or invalid
        """
        missing_keys = []
        for key in REQUIRED_CONFIG_KEYS:
            if key not in self._config or self._config[key] is None:
                missing_keys.append(key)

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}. "
                f"Check environment variables and deployment configuration."
            )

        if self._config["registry_backend"] not in REGISTRY_BACKENDS:
            raise ValueError(
                f"Unsupported REGISTRY_BACKEND '{self._config['registry_backend']}'. "
                f"Expected one of: {', '.join(REGISTRY_BACKENDS)}"
            )

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        return {
            # API settings
            "host": os.getenv("API_HOST", "0.0.0.0"),
            "port": int(os.getenv("PORT", "3001")),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "debug": os.getenv("DEBUG", "false").lower() == "true",
            "static_dir": os.getenv("STATIC_DIR", "dist"),
            "cors_origins": [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
            # Registry settings
            "registry_backend": os.getenv("REGISTRY_BACKEND", "memory").lower(),
            "redis_url": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self._config.copy()

    @staticmethod
    def get_config_schema() -> Dict[str, Any]:
        """
        Get the configuration schema (contract) for this module.

        Returns:
            Dictionary with 'required' and 'optional' key specifications

        Example:
            >>> schema = ConfigModule.get_config_schema()
            >>> print(schema['required']['registry_backend'])
            'Session registry backend (memory or redis)'
        """
        return {
            "required": REQUIRED_CONFIG_KEYS.copy(),
            "optional": OPTIONAL_CONFIG_KEYS.copy(),
        }


# Singleton instance
_instance = None


def get_config() -> ConfigModule:
    """Get the configuration module singleton."""
    global _instance
    if _instance is None:
        _instance = ConfigModule()
    return _instance


def reset_config() -> None:
    """Drop the singleton so the next get_config() re-reads the environment."""
    global _instance
    _instance = None


__all__ = ["get_config", "reset_config", "ConfigModule", "REGISTRY_BACKENDS"]

"""Environment settings."""

import os
from typing import Optional


DEFAULT_CONFIG_PATH = "config/config.yaml"


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set
            required: Whether the variable is required

        Returns:
            str: Environment variable value

        Raises:
            ValueError: If required variable is not set
        """
        value = os.getenv(key, default)
        if required and not value:
            raise ValueError(f"Required environment variable not set: {key}")
        return value or ""

    @staticmethod
    def config_path() -> str:
        return Settings.get("NETPULSE_CONFIG", DEFAULT_CONFIG_PATH)

    @staticmethod
    def log_level() -> str:
        return Settings.get("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def log_format() -> str:
        return Settings.get("LOG_FORMAT", "json").lower()

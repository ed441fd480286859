"""Monitor configuration loading: YAML/JSON with ${ENV_VAR} expansion."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from .models import MonitorSystemConfig


# ${NAME} or ${NAME:-fallback}
ENV_PATTERN = re.compile(r'\$\{(\w+)(?::-([^}]*))?\}')


class ConfigLoader:
    """Load and validate monitor configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> MonitorSystemConfig:
        """
        Load the topology and global settings from a file.

        JSON is a subset of YAML, so both formats go through the YAML parser.

        Args:
            config_path: Path to configuration file

        Returns:
            MonitorSystemConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If parsing fails
            ValueError: If the document root is not a mapping
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f)

        if not isinstance(raw_config, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")

        return MonitorSystemConfig(**ConfigLoader.expand_env(raw_config))

    @staticmethod
    def expand_env(obj: Any) -> Any:
        """
        Recursively expand ${VAR} and ${VAR:-default} in string values.

        Unset variables without a default expand to an empty string.
        """
        if isinstance(obj, str):
            return ENV_PATTERN.sub(lambda m: os.getenv(m.group(1), m.group(2) or ''), obj)

        if isinstance(obj, dict):
            return {key: ConfigLoader.expand_env(value) for key, value in obj.items()}

        if isinstance(obj, list):
            return [ConfigLoader.expand_env(item) for item in obj]

        return obj

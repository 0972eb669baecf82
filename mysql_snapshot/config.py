"""
Configuration loading and validation for MySQL Snapshot.
"""

import os
import re
from typing import Any, Union

import yaml

from .models import BackupJob


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection(self) -> dict[str, Any]:
        """Get database connection settings."""
        connection = self.config.get('connection')
        if not connection:
            raise ValueError("Section 'connection' not found in configuration")
        return connection

    def get_tables(self) -> Union[str, list[str], None]:
        """Get the table filter (list or comma separated string)."""
        return self.config.get('tables')

    def get_show(self) -> Union[str, list[str], None]:
        """Get the object categories to include."""
        return self.config.get('show')

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging') or {}

    def build_job(self) -> BackupJob:
        """Build the backup job described by this configuration."""
        return BackupJob.from_config(
            connection=self.get_connection(),
            tables=self.get_tables(),
            show=self.get_show(),
            output=self.get_output_settings(),
        )

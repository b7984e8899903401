"""
Configuration loading for superdump.
"""

import os
import re
from typing import Any

import yaml


class ConfigLoader:
    """Loads configuration from a YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return self._resolve_env_vars(config or {})

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

    def _get_section(self, name: str) -> dict[str, Any]:
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Configuration section '{name}' must be a mapping")
        return section

    def get_connection_settings(self) -> dict[str, Any]:
        """Get database connection settings."""
        return self._get_section('connection')

    def get_dump_settings(self) -> dict[str, Any]:
        """Get dump behaviour settings (batching, locking, table list)."""
        return self._get_section('dump')

    def get_select_map(self) -> dict[str, Any]:
        """Get column substitutions, keyed by table then column."""
        return self._get_section('select')

    def get_where_map(self) -> dict[str, Any]:
        """Get WHERE clauses keyed by table."""
        return self._get_section('where')

    def get_filter_map(self) -> dict[str, Any]:
        """Get table filter policies (ignore/nodata)."""
        return self._get_section('filter')

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self._get_section('output')

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self._get_section('logging')

"""Configuration management for the stale file cleaner."""

import os
import yaml
from typing import Dict, Any, Optional
from .config_validator import ConfigValidator
from ..reporters.run_log import DEFAULT_LOG_NAME, default_log_dir


class ConfigManager:
    """Loads optional YAML configuration and fills in defaults."""

    DEFAULT_CONFIG_LOCATIONS = [
        "stale-cleaner.yaml",
        "stale-cleaner.yml",
        os.path.expanduser("~/.stale-cleaner/config.yaml"),
        os.path.expanduser("~/.stale-cleaner/config.yml"),
        "/etc/stale-cleaner/config.yaml",
        "/etc/stale-cleaner/config.yml"
    ]

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_file: Optional[str] = None
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file, falling back to defaults.

        Returns:
            Dictionary containing configuration data.

        Raises:
            FileNotFoundError: If an explicitly given config file does not exist.
            ValueError: If config file is invalid.
        """
        self.config_file = self._find_config_file()
        self.config_data = {}

        if self.config_file:
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    self.config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {self.config_file}: {e}")
            except OSError as e:
                raise ValueError(f"Error reading config file {self.config_file}: {e}")

        self.validator.validate(self.config_data)
        self._set_defaults()

        return self.config_data

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in default locations.

        Returns:
            Path to configuration file, or None if none of the default locations exist.

        Raises:
            FileNotFoundError: If the explicitly given config file is missing.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location

        return None

    def _set_defaults(self):
        """Set default values for optional configuration parameters."""
        defaults = {
            'cleanup': {
                'path': None,
                'age_days': None,
                'extension': None,
                'allow_system_paths': False,
            },
            'logging': {
                'level': 'INFO',
                'directory': default_log_dir(),
                'name': DEFAULT_LOG_NAME,
                'retention_days': 7
            }
        }

        # Merge defaults with existing config
        for section, section_defaults in defaults.items():
            if not self.config_data.get(section):
                self.config_data[section] = {}
            for key, value in section_defaults.items():
                if self.config_data[section].get(key) is None:
                    self.config_data[section][key] = value

    def get_cleanup_config(self) -> Dict[str, Any]:
        """Get cleanup defaults.

        Returns:
            Cleanup configuration dictionary.
        """
        return self.config_data.get('cleanup', {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.

        Returns:
            Logging configuration dictionary.
        """
        return self.config_data.get('logging', {})

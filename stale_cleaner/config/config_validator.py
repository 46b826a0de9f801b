"""Configuration validation for the stale file cleaner."""

from typing import Dict, Any


class ConfigValidator:
    """Validates stale cleaner configuration."""

    KNOWN_SECTIONS = ['cleanup', 'logging']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If configuration is invalid.
        """
        self._validate_structure(config)
        self._validate_cleanup_config(config.get('cleanup') or {})
        self._validate_logging_config(config.get('logging') or {})

    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.

        Args:
            config: Configuration dictionary.

        Raises:
            ValueError: If the document or a section is not a mapping.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        unknown_sections = [section for section in config if section not in self.KNOWN_SECTIONS]
        if unknown_sections:
            raise ValueError(f"Unknown configuration sections: {unknown_sections}")

        for section in self.KNOWN_SECTIONS:
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a mapping")

    def _validate_cleanup_config(self, cleanup_config: Dict[str, Any]) -> None:
        """Validate cleanup defaults.

        Args:
            cleanup_config: Cleanup configuration dictionary.

        Raises:
            ValueError: If a cleanup setting is invalid.
        """
        age_days = cleanup_config.get('age_days')
        if age_days is not None:
            self._require_non_negative_int('cleanup.age_days', age_days)

        extension = cleanup_config.get('extension')
        if extension is not None:
            if not isinstance(extension, str) or not extension.startswith('.'):
                raise ValueError(f"cleanup.extension must start with '.', got {extension!r}")

        path = cleanup_config.get('path')
        if path is not None and (not isinstance(path, str) or not path):
            raise ValueError("cleanup.path must be a non-empty string")

        allow = cleanup_config.get('allow_system_paths')
        if allow is not None and not isinstance(allow, bool):
            raise ValueError("cleanup.allow_system_paths must be true or false")

    def _validate_logging_config(self, logging_config: Dict[str, Any]) -> None:
        """Validate logging configuration.

        Args:
            logging_config: Logging configuration dictionary.

        Raises:
            ValueError: If a logging setting is invalid.
        """
        level = logging_config.get('level')
        if level is not None and str(level).upper() not in self.LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {self.LOG_LEVELS}, got {level!r}")

        retention = logging_config.get('retention_days')
        if retention is not None:
            self._require_non_negative_int('logging.retention_days', retention)

        name = logging_config.get('name')
        if name is not None and (not isinstance(name, str) or not name):
            raise ValueError("logging.name must be a non-empty string")

    @staticmethod
    def _require_non_negative_int(key: str, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{key} must be a non-negative integer, got {value!r}")

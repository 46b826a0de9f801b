"""Errors raised by the stale file cleaner."""


class StaleCleanerError(Exception):
    """Base class for all cleaner errors."""


class PathNotFoundError(StaleCleanerError):
    """The target path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path does not exist: {path}")


class SystemPathProtectedError(StaleCleanerError):
    """The target path is on the platform's protected list."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Refusing to clean protected system path: {path}. "
            f"Use allow_system_paths to override."
        )


class EnumerationError(StaleCleanerError):
    """The root directory could not be listed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not enumerate {path}: {reason}")


class InvalidTargetError(StaleCleanerError, ValueError):
    """Scan parameters are missing or out of range."""

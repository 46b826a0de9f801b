"""Safety checks applied to a cleanup target before scanning."""

import logging
import os
from typing import Optional, Set

from .exceptions import PathNotFoundError, SystemPathProtectedError
from .platforms import ProtectedPathProvider, get_protected_path_provider


class PathGuard:
    """Refuses to operate on missing paths and on protected system paths.

    Matching is exact: only the protected path itself is blocked, in any
    equivalent spelling. Subdirectories of protected paths are allowed.
    """

    def __init__(self, provider: Optional[ProtectedPathProvider] = None):
        """Initialize the guard.

        Args:
            provider: Protected path provider. Defaults to the current platform's.
        """
        self.provider = provider or get_protected_path_provider()
        self.pathmod = self.provider.pathmod
        self.logger = logging.getLogger(__name__)

    def _comparison_key(self, path: str) -> str:
        pathmod = self.pathmod
        normalized = pathmod.normcase(pathmod.normpath(pathmod.abspath(path)))
        separators = pathmod.sep + (pathmod.altsep or "")
        trimmed = normalized.rstrip(separators)
        return trimmed or pathmod.sep

    def _spellings(self, path: str) -> Set[str]:
        keys = {self._comparison_key(path)}
        # Symlink resolution only makes sense against the live filesystem
        if self.pathmod is os.path:
            keys.add(self._comparison_key(os.path.realpath(path)))
        return keys

    def protected_keys(self) -> Set[str]:
        keys: Set[str] = set()
        for protected in self.provider.protected_paths():
            keys.update(self._spellings(protected))
        return keys

    def is_protected(self, path: str) -> bool:
        """Check whether a path is itself one of the protected paths.

        Args:
            path: Path to check.

        Returns:
            True if the path matches a protected path.
        """
        return bool(self._spellings(path) & self.protected_keys())

    def check(self, path: str, allow_system_paths: bool = False) -> str:
        """Validate a cleanup target.

        Args:
            path: Target path.
            allow_system_paths: Permit protected paths instead of refusing them.

        Returns:
            The absolute, normalized target path.

        Raises:
            PathNotFoundError: If the path does not exist.
            SystemPathProtectedError: If the path is protected and not overridden.
        """
        if not os.path.exists(path):
            raise PathNotFoundError(path)

        if self.is_protected(path):
            if not allow_system_paths:
                raise SystemPathProtectedError(path)
            self.logger.warning(f"Operating on protected system path {path} (override enabled)")

        return os.path.normpath(os.path.abspath(path))

"""Core cleanup functionality."""

from .exceptions import (
    StaleCleanerError,
    PathNotFoundError,
    SystemPathProtectedError,
    EnumerationError,
    InvalidTargetError,
)
from .models import FilesystemEntry, RemovalCandidate, RunSummary, ScanTarget
from .guard import PathGuard
from .scanner import StaleScanner
from .remover import Remover
from .cleaner import StaleFileCleaner, remove_stale_files

__all__ = [
    "StaleCleanerError", "PathNotFoundError", "SystemPathProtectedError",
    "EnumerationError", "InvalidTargetError",
    "FilesystemEntry", "RemovalCandidate", "RunSummary", "ScanTarget",
    "PathGuard", "StaleScanner", "Remover", "StaleFileCleaner", "remove_stale_files",
]

"""
Stale Cleaner - Remove stale files and empty directories safely.

This package scans a directory tree for files and empty directories older than
a given age, guards against cleaning system paths, and keeps a daily run log.
"""

__version__ = "1.0.0"

from .core.cleaner import StaleFileCleaner, remove_stale_files
from .core.models import RunSummary, ScanTarget

__all__ = ["StaleFileCleaner", "remove_stale_files", "RunSummary", "ScanTarget"]

"""Recursive scanning for stale files and stale empty directories."""

import logging
import os
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from .exceptions import EnumerationError
from .models import FilesystemEntry, RemovalCandidate, ScanResult


class StaleScanner:
    """Finds removal candidates below a root directory."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the scanner.

        Args:
            clock: Callable returning the current time. Defaults to datetime.now.
        """
        self.clock = clock or datetime.now
        self.logger = logging.getLogger(__name__)

    def scan(self, root: str, age_days: int, extension: Optional[str] = None) -> ScanResult:
        """Scan a directory tree for stale entries.

        Args:
            root: Root directory, already validated.
            age_days: Entries modified before now minus this many days are stale.
            extension: If set, only files with exactly this extension qualify.

        Returns:
            ScanResult with the candidates found.

        Raises:
            EnumerationError: If the root directory cannot be listed.
        """
        cutoff = self.clock() - timedelta(days=age_days)
        result = ScanResult(root=root, cutoff=cutoff)

        self.logger.debug(f"Scanning {root} for entries modified before {cutoff}")
        entries = self._enumerate(root, result.skipped_directories)
        result.entries_scanned = len(entries)

        for entry in entries:
            if entry.modified_time >= cutoff:
                continue

            if entry.is_directory:
                if entry.path in result.skipped_directories:
                    continue
                if self._is_empty_directory(entry.path, result.skipped_directories):
                    result.candidates.append(RemovalCandidate(entry))
            elif self._matches_extension(entry, extension):
                result.candidates.append(RemovalCandidate(entry))

        self.logger.debug(f"Scanned {result.entries_scanned} entries, "
                          f"{len(result.candidates)} candidates")
        return result

    def _enumerate(self, root: str, skipped: List[str]) -> List[FilesystemEntry]:
        """List every entry below root, depth first."""
        try:
            entries, subdirectories = self._list_directory(root)
        except OSError as e:
            raise EnumerationError(root, str(e))

        pending = list(subdirectories)
        while pending:
            directory = pending.pop()
            try:
                children, subdirectories = self._list_directory(directory)
            except OSError as e:
                self.logger.warning(f"Could not list {directory}: {e}")
                skipped.append(directory)
                continue
            entries.extend(children)
            pending.extend(subdirectories)

        return entries

    def _list_directory(self, directory: str) -> Tuple[List[FilesystemEntry], List[str]]:
        entries = []
        subdirectories = []
        with os.scandir(directory) as iterator:
            for dir_entry in iterator:
                try:
                    entry = FilesystemEntry.from_dir_entry(dir_entry)
                except OSError as e:
                    # Entry vanished or is unreadable between listing and stat
                    self.logger.debug(f"Skipping {dir_entry.path}: {e}")
                    continue
                entries.append(entry)
                if entry.is_directory:
                    subdirectories.append(entry.path)
        return entries, subdirectories

    def _is_empty_directory(self, path: str, skipped: List[str]) -> bool:
        """Re-list a directory to confirm it currently has no children."""
        try:
            with os.scandir(path) as iterator:
                return next(iterator, None) is None
        except OSError as e:
            self.logger.warning(f"Could not list {path}: {e}")
            skipped.append(path)
            return False

    @staticmethod
    def _matches_extension(entry: FilesystemEntry, extension: Optional[str]) -> bool:
        if not extension:
            return True
        return os.path.normcase(entry.extension) == os.path.normcase(extension)

"""Deletion of removal candidates with per-item failure tolerance."""

import logging
import os
import shutil
from typing import List, Tuple

from .models import RemovalCandidate, RemovalFailure
from ..reporters.run_log import RunLog


class Remover:
    """Deletes candidates one at a time.

    A failure on one candidate is logged and counted; the remaining
    candidates are still processed.
    """

    def __init__(self, run_log: RunLog):
        self.run_log = run_log
        self.logger = logging.getLogger(__name__)

    def remove_all(self, candidates: List[RemovalCandidate]
                   ) -> Tuple[List[RemovalCandidate], List[RemovalFailure]]:
        """Remove every candidate.

        Args:
            candidates: Entries to delete.

        Returns:
            Tuple of (removed candidates, failures).
        """
        removed = []
        failures = []

        for candidate in candidates:
            try:
                self.remove(candidate)
            except OSError as e:
                failure = RemovalFailure(path=candidate.path, message=str(e))
                failures.append(failure)
                self.run_log.error(f"Failed to remove {failure.path}: {failure.message}")
                self.logger.warning(f"Failed to remove {failure.path}: {failure.message}")
                continue

            removed.append(candidate)
            entry = candidate.entry
            self.run_log.info(
                f"Removed {candidate.item_type}: {entry.path} "
                f"(LastModified: {entry.modified_time.strftime('%Y-%m-%d %H:%M:%S')}, "
                f"Size: {entry.size or 0} bytes)"
            )
            self.logger.debug(f"Removed {candidate.item_type.lower()} {entry.path}")

        return removed, failures

    def remove(self, candidate: RemovalCandidate) -> None:
        if candidate.entry.is_directory:
            self._delete_directory(candidate.path)
        else:
            self._delete_file(candidate.path)

    def _delete_directory(self, path: str) -> None:
        # Only directories that were empty at scan time reach this point
        shutil.rmtree(path)

    def _delete_file(self, path: str) -> None:
        os.remove(path)

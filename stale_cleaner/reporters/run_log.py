"""Daily plain-text run log with retention."""

import glob
import logging
import os
import tempfile
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ..core.models import LogEntry

DEFAULT_LOG_NAME = "StaleFileCleanup"


def default_log_dir() -> str:
    """Module-specific directory under the platform temp directory."""
    return os.path.join(tempfile.gettempdir(), "stale-cleaner")


class RunLog:
    """Appends lifecycle events to ``<log_dir>/<log_name>_<date>.log``.

    Each line is written by opening the file in append mode. Write failures
    are reported on the console logger and never raised, so a broken log
    directory does not stop a cleanup run.
    """

    def __init__(self, log_dir: Optional[str] = None, log_name: str = DEFAULT_LOG_NAME,
                 clock: Optional[Callable[[], datetime]] = None):
        """Initialize the run log.

        Args:
            log_dir: Directory holding the daily log files.
            log_name: Prefix of each log file name.
            clock: Callable returning the current time.
        """
        self.log_dir = log_dir or default_log_dir()
        self.log_name = log_name
        self.clock = clock or datetime.now
        self.logger = logging.getLogger(__name__)

    @property
    def log_path(self) -> str:
        """Path of today's log file."""
        return os.path.join(self.log_dir, f"{self.log_name}_{self.clock().strftime('%Y-%m-%d')}.log")

    def list_log_files(self) -> List[str]:
        pattern = os.path.join(glob.escape(self.log_dir), f"{glob.escape(self.log_name)}_*.log")
        return sorted(glob.glob(pattern))

    def purge_old_logs(self, retention_days: int) -> int:
        """Delete log files last modified before the retention window.

        Args:
            retention_days: Number of days of logs to keep.

        Returns:
            Number of log files deleted.
        """
        cutoff = self.clock() - timedelta(days=retention_days)
        deleted = 0

        for log_file in self.list_log_files():
            try:
                modified = datetime.fromtimestamp(os.path.getmtime(log_file))
                if modified < cutoff:
                    os.remove(log_file)
                    deleted += 1
                    self.logger.debug(f"Deleted old log file {log_file}")
            except OSError as e:
                self.logger.warning(f"Could not delete old log file {log_file}: {e}")

        return deleted

    def write(self, level: str, message: str) -> bool:
        """Append one entry to today's log file.

        Returns:
            True if the entry was written.
        """
        entry = LogEntry(timestamp=self.clock(), level=level, message=message)
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(self.log_path, 'a', encoding='utf-8') as f:
                f.write(entry.format() + "\n")
        except OSError as e:
            self.logger.warning(f"Could not write to log file {self.log_path}: {e}")
            return False
        return True

    def info(self, message: str) -> bool:
        return self.write("INFO", message)

    def warning(self, message: str) -> bool:
        return self.write("WARNING", message)

    def error(self, message: str) -> bool:
        return self.write("ERROR", message)

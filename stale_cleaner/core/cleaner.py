"""Main stale file cleanup coordinator."""

import logging
import tempfile
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from .confirmation import ConfirmationProvider, PromptConfirmation
from .exceptions import EnumerationError, InvalidTargetError, StaleCleanerError
from .guard import PathGuard
from .models import RunSummary, ScanTarget
from .platforms import ProtectedPathProvider
from .remover import Remover
from .scanner import StaleScanner
from ..config.config_manager import ConfigManager
from ..reporters.run_log import DEFAULT_LOG_NAME, RunLog
from ..utils.formatters import format_duration, format_file_size


class StaleFileCleaner:
    """Runs guard, scan, confirmation and removal for a ScanTarget."""

    def __init__(self, log_dir: Optional[str] = None, log_name: str = DEFAULT_LOG_NAME,
                 clock: Optional[Callable[[], datetime]] = None,
                 confirmation: Optional[ConfirmationProvider] = None,
                 protected_paths: Optional[ProtectedPathProvider] = None):
        """Initialize the cleaner.

        Args:
            log_dir: Directory for daily run logs. Defaults to a temp subdirectory.
            log_name: Prefix of the daily log file names.
            clock: Callable returning the current time.
            confirmation: Provider asked before deleting. Defaults to a terminal prompt.
            protected_paths: Protected path provider. Defaults to the current platform's.
        """
        self.clock = clock or datetime.now
        self.confirmation = confirmation or PromptConfirmation()
        self.run_log = RunLog(log_dir=log_dir, log_name=log_name, clock=self.clock)
        self.guard = PathGuard(protected_paths)
        self.scanner = StaleScanner(clock=self.clock)
        self.remover = Remover(self.run_log)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config_manager: ConfigManager, **kwargs) -> "StaleFileCleaner":
        """Create a cleaner using the logging section of a loaded configuration."""
        logging_config = config_manager.get_logging_config()
        kwargs.setdefault('log_dir', logging_config.get('directory'))
        kwargs.setdefault('log_name', logging_config.get('name', DEFAULT_LOG_NAME))
        return cls(**kwargs)

    def run(self, target: ScanTarget) -> RunSummary:
        """Clean stale entries below the target path.

        Args:
            target: Run parameters.

        Returns:
            RunSummary describing the run.

        Raises:
            PathNotFoundError: If the target path does not exist.
            SystemPathProtectedError: If the target path is protected and not overridden.
        """
        started = time.monotonic()
        summary = RunSummary(dry_run=target.dry_run)

        self.run_log.purge_old_logs(target.log_retention_days)
        self.run_log.info(f"Starting stale file cleanup. {target.describe()}")

        if target.extension and not target.extension.startswith('.'):
            self.logger.warning(f"Extension '{target.extension}' has no leading dot and will not match any file")

        try:
            root = self.guard.check(target.path, target.allow_system_paths)
        except StaleCleanerError as e:
            self.run_log.error(str(e))
            raise

        try:
            scan = self.scanner.scan(root, target.age_days, target.extension)
        except EnumerationError as e:
            self.logger.warning(str(e))
            self.run_log.warning(str(e))
            summary.aborted = True
            return self._finish(summary, started)

        for skipped in scan.skipped_directories:
            self.run_log.warning(f"Could not list directory, skipped: {skipped}")

        summary.candidates = scan.candidates
        summary.found = len(scan.candidates)

        if not scan.candidates:
            self.logger.info(f"No stale files found in {root} older than {target.age_days} days")
            return self._finish(summary, started)

        self.logger.info(f"Found {summary.found} stale item(s) in {root}")
        for candidate in scan.candidates:
            self.logger.debug(f"  {candidate.item_type}: {candidate.path} "
                              f"(modified {candidate.entry.modified_time.strftime('%Y-%m-%d %H:%M:%S')})")

        if target.dry_run:
            self.logger.info(f"Dry run: would remove {summary.found} item(s)")
            self.run_log.info(f"Dry run: would remove {summary.found} item(s)")
            return self._finish(summary, started)

        if not target.force and not self.confirmation.confirm(summary.found):
            summary.cancelled = True
            self.logger.info("Operation cancelled by user")
            self.run_log.info("Operation cancelled by user")
            return self._finish(summary, started)

        removed, failures = self.remover.remove_all(scan.candidates)
        summary.removed = len(removed)
        summary.failed = len(failures)
        summary.failures = failures
        summary.bytes_removed = sum(candidate.entry.size or 0 for candidate in removed)

        self.logger.info(f"Removed {summary.removed} item(s) ({format_file_size(summary.bytes_removed)})")
        if summary.failed:
            self.logger.warning(f"Failed to remove {summary.failed} item(s)")

        return self._finish(summary, started)

    def _finish(self, summary: RunSummary, started: float) -> RunSummary:
        summary.duration = timedelta(seconds=time.monotonic() - started)
        self.run_log.info(
            f"Cleanup completed. Found: {summary.found}, Removed: {summary.removed}, "
            f"Failed: {summary.failed}, Duration: {format_duration(summary.duration)}"
        )
        return summary


def remove_stale_files(age_days: int, path: Optional[str] = None, extension: Optional[str] = None,
                       force: bool = False, dry_run: bool = False, log_retention_days: int = 7,
                       allow_system_paths: bool = False,
                       confirmation: Optional[ConfirmationProvider] = None,
                       clock: Optional[Callable[[], datetime]] = None,
                       log_dir: Optional[str] = None,
                       log_name: str = DEFAULT_LOG_NAME) -> RunSummary:
    """Remove stale files and stale empty directories below a path.

    Args:
        age_days: Entries last modified more than this many days ago are stale.
        path: Root directory. Defaults to the platform temp directory.
        extension: Only remove files with exactly this extension (e.g. ".log").
        force: Skip the confirmation prompt.
        dry_run: Report candidates without deleting anything.
        log_retention_days: Days of daily run logs to keep.
        allow_system_paths: Permit protected system paths.
        confirmation: Confirmation provider used when force is not set.
        clock: Callable returning the current time.
        log_dir: Directory for daily run logs.
        log_name: Prefix of the daily log file names.

    Returns:
        RunSummary describing the run.
    """
    try:
        target = ScanTarget(
            path=path or tempfile.gettempdir(),
            age_days=age_days,
            extension=extension,
            force=force,
            dry_run=dry_run,
            allow_system_paths=allow_system_paths,
            log_retention_days=log_retention_days,
        )
    except InvalidTargetError as e:
        RunLog(log_dir=log_dir, log_name=log_name, clock=clock).error(str(e))
        raise
    cleaner = StaleFileCleaner(
        log_dir=log_dir,
        log_name=log_name,
        clock=clock,
        confirmation=confirmation,
    )
    return cleaner.run(target)

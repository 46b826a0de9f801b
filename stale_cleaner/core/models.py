"""Data models for stale file cleanup."""

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from .exceptions import InvalidTargetError


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ScanTarget:
    """Parameters for a single cleanup run."""
    path: str
    age_days: int
    extension: Optional[str] = None
    force: bool = False
    dry_run: bool = False
    allow_system_paths: bool = False
    log_retention_days: int = 7

    def __post_init__(self):
        if self.age_days is None:
            raise InvalidTargetError("age_days is required")
        if not _is_int(self.age_days) or self.age_days < 0:
            raise InvalidTargetError(f"age_days must be a non-negative integer, got {self.age_days!r}")
        if not _is_int(self.log_retention_days) or self.log_retention_days < 0:
            raise InvalidTargetError(
                f"log_retention_days must be a non-negative integer, got {self.log_retention_days!r}"
            )
        if not self.path:
            raise InvalidTargetError("path cannot be empty")

    def describe(self) -> str:
        """Render every effective parameter on one line."""
        return (
            f"Path={self.path}, Age={self.age_days}, Extension={self.extension or '(any)'}, "
            f"Force={self.force}, DryRun={self.dry_run}, "
            f"AllowSystemPaths={self.allow_system_paths}, "
            f"LogRetentionDays={self.log_retention_days}"
        )


@dataclass(frozen=True)
class FilesystemEntry:
    """A file or directory found while scanning."""
    path: str
    is_directory: bool
    modified_time: datetime
    size: Optional[int] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        """Text from the last dot of the name, e.g. ``.gz`` or ``.bashrc``.

        A leading dot counts, so dotfiles have their whole name as extension.
        Names without a dot or ending in one have no extension.
        """
        if self.is_directory:
            return ""
        dot = self.name.rfind(".")
        if dot == -1 or dot == len(self.name) - 1:
            return ""
        return self.name[dot:]

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry) -> "FilesystemEntry":
        """Build an entry from ``os.scandir`` output without following symlinks."""
        entry_stat = entry.stat(follow_symlinks=False)
        is_directory = entry.is_dir(follow_symlinks=False)
        return cls(
            path=entry.path,
            is_directory=is_directory,
            modified_time=datetime.fromtimestamp(entry_stat.st_mtime),
            size=None if is_directory else entry_stat.st_size,
        )


@dataclass(frozen=True)
class RemovalCandidate:
    """An entry selected for removal in this run."""
    entry: FilesystemEntry

    @property
    def path(self) -> str:
        return self.entry.path

    @property
    def item_type(self) -> str:
        return "Directory" if self.entry.is_directory else "File"


@dataclass
class ScanResult:
    """Outcome of scanning a root directory."""
    root: str
    cutoff: datetime
    candidates: List[RemovalCandidate] = field(default_factory=list)
    entries_scanned: int = 0
    skipped_directories: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RemovalFailure:
    """A candidate that could not be removed."""
    path: str
    message: str


@dataclass(frozen=True)
class LogEntry:
    """One line of the daily run log."""
    timestamp: datetime
    level: str
    message: str

    def format(self) -> str:
        return f"{self.timestamp.strftime('%Y-%m-%d %H:%M:%S')} [{self.level}] {self.message}"


@dataclass
class RunSummary:
    """Aggregate result of a cleanup run."""
    found: int = 0
    removed: int = 0
    failed: int = 0
    bytes_removed: int = 0
    duration: timedelta = field(default_factory=timedelta)
    dry_run: bool = False
    cancelled: bool = False
    aborted: bool = False
    candidates: List[RemovalCandidate] = field(default_factory=list)
    failures: List[RemovalFailure] = field(default_factory=list)

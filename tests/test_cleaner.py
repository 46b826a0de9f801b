from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import click
import pytest

from conftest import StaticProtectedPaths, age, make_dir, read_log, write
from stale_cleaner import remove_stale_files
from stale_cleaner.core.cleaner import StaleFileCleaner
from stale_cleaner.core.confirmation import AutoConfirmation, PromptConfirmation
from stale_cleaner.core.exceptions import (
    EnumerationError,
    InvalidTargetError,
    PathNotFoundError,
    SystemPathProtectedError,
)
from stale_cleaner.core.models import ScanTarget


def _target(path: Path, **kwargs) -> ScanTarget:
    kwargs.setdefault("age_days", 10)
    return ScanTarget(path=str(path), **kwargs)


def _snapshot(root: Path) -> list[tuple]:
    state = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in sorted(dirnames):
            path = Path(dirpath) / name
            state.append((str(path), "dir", path.stat().st_mtime_ns))
        for name in sorted(filenames):
            path = Path(dirpath) / name
            state.append((str(path), path.read_bytes(), path.stat().st_mtime_ns))
    return sorted(state)


def test_removes_stale_file_and_keeps_fresh_one(cleaner: StaleFileCleaner, target_dir: Path) -> None:
    old = write(target_dir / "old.txt", days=20)
    new = write(target_dir / "new.txt", days=1)

    summary = cleaner.run(_target(target_dir, force=True))

    assert not old.exists()
    assert new.exists()
    assert (summary.found, summary.removed, summary.failed) == (1, 1, 0)


def test_extension_filter_limits_removal(cleaner: StaleFileCleaner, target_dir: Path) -> None:
    old_txt = write(target_dir / "old.txt", days=20)
    new_txt = write(target_dir / "new.txt", days=1)
    old_log = write(target_dir / "old.log", days=20)
    new_log = write(target_dir / "new.log", days=1)

    summary = cleaner.run(_target(target_dir, extension=".log", force=True))

    assert not old_log.exists()
    assert old_txt.exists()
    assert new_txt.exists()
    assert new_log.exists()
    assert summary.removed == 1


def test_removes_empty_stale_directory_only(cleaner: StaleFileCleaner, target_dir: Path) -> None:
    empty_old = make_dir(target_dir / "EmptyOld", days=20)
    keep = write(target_dir / "FullOld" / "fresh.txt", days=1)
    age(target_dir / "FullOld", 20)

    summary = cleaner.run(_target(target_dir, force=True))

    assert not empty_old.exists()
    assert keep.exists()
    assert summary.removed == 1


def test_dry_run_reports_and_leaves_filesystem_untouched(cleaner: StaleFileCleaner, target_dir: Path,
                                                         log_dir: Path,
                                                         caplog: pytest.LogCaptureFixture) -> None:
    stale = write(target_dir / "old.txt", days=20)
    make_dir(target_dir / "EmptyOld", days=20)
    write(target_dir / "sub" / "new.txt", days=1)
    before = _snapshot(target_dir)

    with caplog.at_level("INFO"):
        summary = cleaner.run(_target(target_dir, dry_run=True))

    assert _snapshot(target_dir) == before
    assert stale.exists()
    assert summary.dry_run
    assert (summary.found, summary.removed) == (2, 0)
    assert "would remove 2 item(s)" in caplog.text
    assert "would remove 2 item(s)" in read_log(log_dir)


def test_single_stale_file_dry_run(cleaner: StaleFileCleaner, target_dir: Path,
                                   caplog: pytest.LogCaptureFixture) -> None:
    stale = write(target_dir / "old.txt", days=20)

    with caplog.at_level("INFO"):
        cleaner.run(_target(target_dir, dry_run=True))

    assert "would remove 1 item(s)" in caplog.text
    assert stale.exists()


def test_second_run_finds_nothing(cleaner: StaleFileCleaner, target_dir: Path) -> None:
    write(target_dir / "old.txt", days=20)
    make_dir(target_dir / "EmptyOld", days=20)

    first = cleaner.run(_target(target_dir, force=True))
    second = cleaner.run(_target(target_dir, force=True))

    assert first.removed == 2
    assert (second.found, second.removed, second.failed) == (0, 0, 0)


def test_partial_failure_is_contained(cleaner: StaleFileCleaner, target_dir: Path, log_dir: Path) -> None:
    locked = write(target_dir / "locked.txt", days=20)
    free = write(target_dir / "free.txt", days=20)
    original = cleaner.remover._delete_file

    def picky(path):
        if path == str(locked):
            raise PermissionError(13, "Permission denied", path)
        original(path)

    cleaner.remover._delete_file = picky

    summary = cleaner.run(_target(target_dir, force=True))

    assert (summary.found, summary.removed, summary.failed) == (2, 1, 1)
    assert summary.failures[0].path == str(locked)
    assert locked.exists()
    assert not free.exists()
    assert "Removed: 1, Failed: 1" in read_log(log_dir)


def test_protected_path_is_never_cleaned_even_when_forced(target_dir: Path, log_dir: Path) -> None:
    stale = write(target_dir / "old.txt", days=20)
    cleaner = StaleFileCleaner(
        log_dir=str(log_dir),
        confirmation=AutoConfirmation(True),
        protected_paths=StaticProtectedPaths([target_dir]),
    )

    with pytest.raises(SystemPathProtectedError):
        cleaner.run(_target(target_dir, force=True))

    assert stale.exists()
    assert "[ERROR] Refusing to clean protected system path" in read_log(log_dir)


def test_protected_path_override(target_dir: Path, log_dir: Path) -> None:
    stale = write(target_dir / "old.txt", days=20)
    cleaner = StaleFileCleaner(
        log_dir=str(log_dir),
        protected_paths=StaticProtectedPaths([target_dir]),
    )

    summary = cleaner.run(_target(target_dir, force=True, allow_system_paths=True))

    assert summary.removed == 1
    assert not stale.exists()


def test_missing_path_fails_and_is_logged(cleaner: StaleFileCleaner, tmp_path: Path, log_dir: Path) -> None:
    with pytest.raises(PathNotFoundError):
        cleaner.run(_target(tmp_path / "missing", force=True))

    assert "[ERROR] Path does not exist" in read_log(log_dir)


def test_declined_confirmation_deletes_nothing(target_dir: Path, log_dir: Path) -> None:
    stale = write(target_dir / "old.txt", days=20)
    cleaner = StaleFileCleaner(
        log_dir=str(log_dir),
        confirmation=AutoConfirmation(False),
        protected_paths=StaticProtectedPaths([]),
    )

    summary = cleaner.run(_target(target_dir))

    assert summary.cancelled
    assert summary.removed == 0
    assert stale.exists()
    assert "Operation cancelled by user" in read_log(log_dir)


@pytest.mark.parametrize("reply,removed", [("y", True), ("Y", True), (" y ", True),
                                           ("yes", False), ("n", False), ("", False)])
def test_prompt_requires_y(target_dir: Path, log_dir: Path, reply: str, removed: bool) -> None:
    stale = write(target_dir / "old.txt", days=20)
    questions = []

    def prompt(text):
        questions.append(text)
        return reply

    cleaner = StaleFileCleaner(
        log_dir=str(log_dir),
        confirmation=PromptConfirmation(prompt=prompt),
        protected_paths=StaticProtectedPaths([]),
    )

    cleaner.run(_target(target_dir))

    assert questions == ["Remove 1 item(s)? (y/N)"]
    assert stale.exists() is not removed


def test_force_skips_confirmation(target_dir: Path, log_dir: Path) -> None:
    write(target_dir / "old.txt", days=20)

    class Exploding(AutoConfirmation):
        def confirm(self, count):
            raise AssertionError("should not be asked")

    cleaner = StaleFileCleaner(log_dir=str(log_dir), confirmation=Exploding(),
                               protected_paths=StaticProtectedPaths([]))

    assert cleaner.run(_target(target_dir, force=True)).removed == 1


def test_no_candidates_writes_only_start_and_end(cleaner: StaleFileCleaner, target_dir: Path,
                                                 log_dir: Path) -> None:
    write(target_dir / "new.txt", days=1)

    summary = cleaner.run(_target(target_dir, force=True))

    lines = read_log(log_dir).splitlines()
    assert summary.found == 0
    assert len(lines) == 2
    assert "Starting stale file cleanup" in lines[0]
    assert "Age=10" in lines[0]
    assert "Cleanup completed" in lines[1]


def test_old_logs_purged_before_run_entries(cleaner: StaleFileCleaner, target_dir: Path,
                                            log_dir: Path) -> None:
    expired = write(log_dir / "StaleFileCleanup_2000-01-01.log", "old entries\n", days=30)

    cleaner.run(_target(target_dir, force=True, log_retention_days=7))

    assert not expired.exists()
    assert len(list(log_dir.glob("*.log"))) == 1


def test_root_enumeration_failure_aborts_run(cleaner: StaleFileCleaner, target_dir: Path,
                                             log_dir: Path) -> None:
    stale = write(target_dir / "old.txt", days=20)

    def refuse(root, age_days, extension=None):
        raise EnumerationError(root, "Permission denied")

    cleaner.scanner.scan = refuse

    summary = cleaner.run(_target(target_dir, force=True))

    assert summary.aborted
    assert summary.removed == 0
    assert stale.exists()
    assert "[WARNING] Could not enumerate" in read_log(log_dir)


@pytest.mark.parametrize("kwargs", [{"age_days": -1}, {"age_days": None}, {"age_days": True},
                                    {"age_days": 1, "log_retention_days": -3}])
def test_invalid_target_rejected_and_logged(target_dir: Path, log_dir: Path, kwargs: dict) -> None:
    with pytest.raises(InvalidTargetError):
        ScanTarget(path=str(target_dir), **kwargs)
    with pytest.raises(InvalidTargetError):
        remove_stale_files(path=str(target_dir), force=True, log_dir=str(log_dir), **kwargs)

    assert "[ERROR]" in read_log(log_dir)


def test_remove_stale_files_function(target_dir: Path, log_dir: Path) -> None:
    old = write(target_dir / "old.txt", days=20)
    new = write(target_dir / "new.txt", days=1)

    summary = remove_stale_files(age_days=10, path=str(target_dir), force=True, log_dir=str(log_dir))

    assert summary.removed == 1
    assert summary.bytes_removed == len("data")
    assert not old.exists()
    assert new.exists()


def test_prompt_abort_counts_as_decline() -> None:
    def interrupted(text):
        raise click.exceptions.Abort()

    assert PromptConfirmation(prompt=interrupted).confirm(3) is False


def test_prompt_on_closed_stdin_cancels_run(target_dir: Path, log_dir: Path,
                                            monkeypatch: pytest.MonkeyPatch) -> None:
    stale = write(target_dir / "old.txt", days=20)
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))

    summary = remove_stale_files(age_days=10, path=str(target_dir), log_dir=str(log_dir))

    assert summary.cancelled
    assert summary.removed == 0
    assert stale.exists()
    log = read_log(log_dir)
    assert "Operation cancelled by user" in log
    assert "Cleanup completed" in log

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import pytest

from stale_cleaner.core.cleaner import StaleFileCleaner
from stale_cleaner.core.confirmation import AutoConfirmation
from stale_cleaner.core.platforms import ProtectedPathProvider

DAY = 86400


def age(path: Path, days: float) -> None:
    """Set a path's access and modification times to ``days`` ago."""
    stamp = time.time() - days * DAY
    os.utime(path, (stamp, stamp))


def write(path: Path, content: str = "data", days: float = 0) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    age(path, days)
    return path


def make_dir(path: Path, days: float = 0) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    age(path, days)
    return path


class StaticProtectedPaths(ProtectedPathProvider):
    """Protected path provider with an explicit list."""

    name = "test"
    pathmod = os.path

    def __init__(self, paths):
        self.paths = [str(p) for p in paths]

    def protected_paths(self):
        return list(self.paths)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    target = tmp_path / "target"
    target.mkdir()
    return target


@pytest.fixture
def cleaner(log_dir: Path) -> StaleFileCleaner:
    return StaleFileCleaner(
        log_dir=str(log_dir),
        confirmation=AutoConfirmation(True),
        protected_paths=StaticProtectedPaths([]),
    )


def read_log(log_dir: Path) -> str:
    return "".join(p.read_text() for p in sorted(log_dir.glob("*.log")))

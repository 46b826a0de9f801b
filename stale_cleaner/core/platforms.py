"""Per-platform lists of paths the cleaner refuses to operate on."""

import logging
import ntpath
import os
import posixpath
import sys
from typing import Callable, List, Mapping, Optional

import psutil


class ProtectedPathProvider:
    """Lists protected paths for one platform.

    Subclasses set ``pathmod`` to the path module whose semantics
    (separators, case folding) apply on that platform.
    """

    name = "generic"
    pathmod = os.path

    def protected_paths(self) -> List[str]:
        raise NotImplementedError


class UnixProtectedPaths(ProtectedPathProvider):
    """Fixed system directories on Linux and other Unix systems."""

    name = "unix"
    pathmod = posixpath
    PATHS = ["/", "/etc", "/bin", "/sbin", "/usr", "/boot", "/sys", "/proc"]

    def protected_paths(self) -> List[str]:
        return list(self.PATHS)


class MacProtectedPaths(UnixProtectedPaths):
    """Unix directories plus the macOS system and application roots."""

    name = "macos"
    PATHS = UnixProtectedPaths.PATHS + ["/System", "/Applications"]


def _list_drive_roots() -> List[str]:
    roots = []
    for partition in psutil.disk_partitions(all=False):
        if partition.mountpoint:
            roots.append(partition.mountpoint)
    return roots


class WindowsProtectedPaths(ProtectedPathProvider):
    """Drive roots and environment-designated system folders on Windows."""

    name = "windows"
    pathmod = ntpath
    ENV_FOLDERS = ["ProgramFiles", "ProgramFiles(x86)", "ProgramData"]

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 drive_lister: Optional[Callable[[], List[str]]] = None):
        """Initialize the provider.

        Args:
            environ: Environment to read folder locations from. Defaults to os.environ.
            drive_lister: Callable returning mounted drive roots. Defaults to psutil.
        """
        self.environ = os.environ if environ is None else environ
        self.drive_lister = drive_lister or _list_drive_roots
        self.logger = logging.getLogger(__name__)

    def protected_paths(self) -> List[str]:
        paths = []

        try:
            paths.extend(self.drive_lister())
        except Exception as e:
            self.logger.warning(f"Could not enumerate drive roots: {e}")

        system_root = self.environ.get('SystemRoot') or self.environ.get('windir')
        if system_root:
            paths.append(system_root)
            paths.append(ntpath.join(system_root, 'System32'))

        for variable in self.ENV_FOLDERS:
            value = self.environ.get(variable)
            if value:
                paths.append(value)

        return paths


def get_protected_path_provider(platform: Optional[str] = None) -> ProtectedPathProvider:
    """Return the provider matching a ``sys.platform`` value."""
    platform = platform or sys.platform
    if platform.startswith('win'):
        return WindowsProtectedPaths()
    if platform == 'darwin':
        return MacProtectedPaths()
    return UnixProtectedPaths()

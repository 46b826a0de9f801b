"""Utility modules for stale file cleanup."""

from .formatters import format_file_size, format_date, format_duration

__all__ = ["format_file_size", "format_date", "format_duration"]

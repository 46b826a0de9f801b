"""Run log reporting."""

from .run_log import RunLog, default_log_dir

__all__ = ["RunLog", "default_log_dir"]

from __future__ import annotations

from .logger import MigrationLogger
from .handlers import build_console_handler, build_run_log_handler, run_log_path
from .formatters import JSONFormatter, HumanReadableFormatter

__all__ = [
    "MigrationLogger",
    "build_console_handler",
    "build_run_log_handler",
    "run_log_path",
    "JSONFormatter",
    "HumanReadableFormatter",
]

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .formatters import JSONFormatter, HumanReadableFormatter


RUN_LOG_SUFFIX = ".jsonl"


def run_log_path(logs_dir: Path, run_name: str) -> Path:
    """Return the JSONL file of one run, e.g. ``<logs_dir>/code-scanning-acme-app-20240101T000000Z.jsonl``."""
    return logs_dir / f"{run_name}{RUN_LOG_SUFFIX}"


def build_run_log_handler(logs_dir: Path, run_name: str, level: int = logging.INFO) -> logging.FileHandler:
    """Create the per-run file handler writing one JSON object per line.

    The directory is created on demand and an existing file of the same run
    is appended to.
    """
    path = run_log_path(logs_dir, run_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    # stdout carries summaries and JSON output only
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(HumanReadableFormatter())
    return handler

from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .handlers import build_console_handler, build_run_log_handler


class MigrationLogger(Resource):
    """Structured logger for migration runs.

    Writes a JSONL file per run (when ``run_name`` is given) and optionally
    mirrors records to the console. Keyword arguments passed to the logging
    methods become structured fields.
    """

    def init(
        self,
        *,
        run_name: str | None = None,
        logs_dir: Path,
        logger_name: str = "alert_migrator",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "MigrationLogger":
        """Initialize handlers for one run.

        Args:
            run_name: Log file stem; no file handler is attached when omitted
            logs_dir: Directory to store log files
            logger_name: Logger name
            console_output: Whether to enable console output
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric_level)
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        if run_name:
            file_handler = build_run_log_handler(logs_dir, run_name, level=numeric_level)
            self.log_file: Path | None = Path(file_handler.baseFilename)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)
        else:
            self.log_file = None

        if console_output:
            console_handler = build_console_handler(level=numeric_level)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "MigrationLogger") -> None:
        """Flush and close all handlers so the log file is complete."""
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs or None)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs or None)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs or None)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._logger.error(message, extra=kwargs or None, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        self._logger.exception(message, extra=kwargs or None)

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


# Attributes every LogRecord carries; anything else arrived via ``extra``
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class JSONFormatter(JsonFormatter):
    """JSON formatter using python-json-logger.

    Structured fields passed via ``extra`` end up as top-level keys.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()


class HumanReadableFormatter(logging.Formatter):
    """Console formatter: timestamp, level, event name, then key=value fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        # Tracebacks are appended after this line by Formatter.format
        line = super().formatMessage(record)
        fields = {k: v for k, v in extra_fields(record).items() if v is not None}
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line

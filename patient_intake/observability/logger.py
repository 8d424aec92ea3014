"""
Structured logging for patient-intake

Every module logs through a child of the ``patient_intake`` logger. Records
are rendered as JSON lines by python-json-logger, or as plain text for local
runs, and always go to stderr so that CLI output on stdout stays parseable.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "patient_intake"
SERVICE_NAME = "patient-intake"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class IntakeJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter stamping each record with service and source location

    Fields passed through ``extra=`` (attempt_id, file_name, record_count, ...)
    are emitted as top-level keys by the base formatter.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        log_record["source"] = f"{record.module}:{record.lineno}"
        log_record["thread"] = record.threadName


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str | None = None,
    format_type: str = "json",
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler

    Calling it again replaces the previous handler, so the CLI can re-apply
    settings after they are loaded.

    Args:
        name: Logger name
        level: Level name; falls back to $LOG_LEVEL, then INFO
        format_type: "json" or "text"

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(IntakeJsonFormatter(JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the package logger

    The package logger is set up with defaults the first time any module
    asks for a logger.
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logger(ROOT_LOGGER_NAME)

    return logging.getLogger(name)


class log_operation:
    """
    Time a block and log its start and outcome

    Usage:
        with log_operation("Preparing CRM sync payload", logger=logger, record_count=2) as op:
            ...
        op.duration  # seconds
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.fields = {"operation": operation_name, **fields}
        self.started: float | None = None
        self.duration: float | None = None

    def __enter__(self) -> "log_operation":
        self.started = time.monotonic()
        self.logger.debug(f"{self.operation_name} started", extra=self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.duration = time.monotonic() - self.started
        fields = {**self.fields, "duration_seconds": round(self.duration, 3)}

        if exc_type is None:
            self.logger.info(f"{self.operation_name} finished", extra={**fields, "status": "success"})
        else:
            self.logger.error(
                f"{self.operation_name} failed",
                extra={**fields, "status": "error", "error_type": exc_type.__name__},
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False

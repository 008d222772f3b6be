"""
Structured JSON logging for the checkpoint repository

This module provides consistent structured logging across the package
using python-json-logger for easy parsing and analysis.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "checkpoint"

# Names of loggers created through get_logger
_configured_loggers: set[str] = set()

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter stamping every record with time, level, source location
    and the name of the thread that emitted it
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["source"] = f"{record.module}:{record.funcName}:{record.lineno}"
        log_record["thread_name"] = record.threadName


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    return logging.Formatter(
        fmt="%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Attach a single stderr handler to the named logger

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (falls back to $LOG_LEVEL)
        format_type: "json" or "text" (falls back to $LOG_FORMAT)

    Returns:
        The configured logger
    """
    log_level = LOG_LEVELS.get((level or os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)

    # stdout is reserved for CLI output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(format_type or os.getenv("LOG_FORMAT") or "json"))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance, configuring it on first use

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    _configured_loggers.add(name)

    if not logger.handlers:
        return setup_logger(name)

    return logger


def reconfigure_loggers(level: str | None = None, format_type: str | None = None) -> None:
    """
    Re-apply level and format to every logger handed out by get_logger

    Module loggers are configured at import time, before a CLI has parsed
    its options or loaded its .env file.
    """
    for name in sorted(_configured_loggers):
        setup_logger(name, level=level, format_type=format_type)


class log_operation:
    """
    Context manager that logs the start, outcome and duration of a
    repository operation

    Usage:
        with log_operation("Flushing repository", logger=logger, repository="orders", records=12):
            storage.write(datas)

    Exceptions are logged with their type and always re-raised.
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **context):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.context = context
        self._started = 0.0

    def _fields(self, status: str | None = None) -> dict:
        fields = {"operation": self.operation_name, **self.context}
        if status is not None:
            fields["status"] = status
            fields["duration_ms"] = round((time.perf_counter() - self._started) * 1000, 1)
        return fields

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra=self._fields("success"))
            return False

        fields = self._fields("error")
        fields["error_type"] = exc_type.__name__
        fields["error_message"] = str(exc_val)
        self.logger.error(f"Failed: {self.operation_name}", extra=fields, exc_info=(exc_type, exc_val, exc_tb))
        return False

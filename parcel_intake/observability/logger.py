"""
Structured JSON logging for parcel-intake

Every module obtains its logger through get_logger(__name__); records are
emitted as one JSON object per line (python-json-logger) unless
LOG_FORMAT=text is set for local debugging.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "parcel-intake"
PACKAGE_PREFIX = "parcel_intake."

JSON_FORMAT = "%(timestamp)s %(level)s %(component)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def component_of(logger_name: str) -> str:
    """
    Subpackage a logger belongs to.

    >>> component_of("parcel_intake.batch.pipeline")
    'batch'
    >>> component_of("parcel-intake")
    'parcel-intake'
    """
    if logger_name.startswith(PACKAGE_PREFIX):
        return logger_name[len(PACKAGE_PREFIX):].split(".", 1)[0]
    return logger_name


class IntakeJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level, component and logger name to every record"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["component"] = component_of(record.name)
        log_record["logger"] = record.name


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure ``name`` with a single stderr handler.

    Args:
        name: Logger name
        level: Log level (defaults to LOG_LEVEL, then INFO)
        format_type: "json" or "text" (defaults to LOG_FORMAT, then json)
    """
    log_level = _resolve_level(level)
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    # stderr keeps stdout free for CLI reports
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    if format_type == "json":
        handler.setFormatter(IntakeJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt="%H:%M:%S"))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return ``name``'s logger, configuring it on first use"""
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


class log_operation:
    """
    Times a pipeline stage and logs its start and outcome.

    Extra keyword fields are attached to both records:

        with log_operation("Ingesting parcels", logger=logger, source="orders.csv"):
            ...
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = {"operation": operation_name, **extra_fields}
        self.start_time: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self.extra_fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        fields = {
            **self.extra_fields,
            "duration_seconds": round(time.perf_counter() - self.start_time, 3),
            "status": "success" if exc_type is None else "error",
        }
        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra=fields)
        else:
            fields.update(error_type=exc_type.__name__, error_message=str(exc_val))
            self.logger.error(f"Failed: {self.operation_name}", extra=fields, exc_info=True)
        return False

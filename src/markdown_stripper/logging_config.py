# -*- coding: utf-8 -*-
"""
Structured JSON logging configuration.
"""
import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter as jsonlogger

from .config import settings

# Name of the pipeline stage currently running (accessible from any logger)
stage_ctx: ContextVar[str | None] = ContextVar("stage", default=None)


def get_current_stage() -> str | None:
    """Get the running stage name from context."""
    return stage_ctx.get()


class StageFilter(logging.Filter):
    """Add the running stage name to log records."""

    def filter(self, record):
        record.stage = get_current_stage() or "-"
        return True


class CustomJsonFormatter(jsonlogger):
    """Custom JSON formatter with standard fields."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["stage"] = getattr(record, "stage", "-")


def setup_logging(level: str | None = None, stream=None):
    """Configure structured JSON logging on the root logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level or settings.LOG_LEVEL))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = CustomJsonFormatter(
        fmt="%(timestamp)s %(level)s %(name)s %(stage)s %(message)s",
        rename_fields={"timestamp": "@timestamp", "levelname": "level"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(StageFilter())
    root_logger.addHandler(handler)

    return root_logger

"""
Centralized Logging Configuration.

All modules log through structlog loggers from get_logger(); the stdlib
root logger carries the handlers. Configuration is loaded from
config/settings/logging.yaml.

Every record carries the ISO timestamp, level, logger name and call
site. Records about the store, the legacy migration, note locks and
startup also carry a "source" field set through log_with_source().
Passwords and digests are never passed as log fields.

Usage:
    from notemaster.core.logging import get_logger, log_with_source, setup_logging

    setup_logging()
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Message", extra={"key": "value"})
    log_with_source(logger, "migration", "info", "Legacy notes imported", count=3)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notemaster.core.config import find_project_root, get_settings, load_yaml_config

VALID_SOURCES = frozenset({"app", "store", "migration", "lock"})
"""Values accepted for the "source" field of a record."""

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Load logging.yaml once per process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, processors: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)


def _rotating_file_handler(file_config: dict[str, Any]) -> RotatingFileHandler:
    log_path = _resolve_log_path(file_config["path"])
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Values from logging.yaml apply first, then NOTEMASTER_LOG_LEVEL, then
    the arguments given here.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Console output format, 'json' or 'console'
        enable_console: Whether to log to stdout
        enable_file_logging: Whether to write the rotating JSONL file
    """
    config = _load_logging_config()
    console_config = config["handlers"]["console"]
    file_config = config["handlers"]["file"]

    effective_level = level or get_settings().log_level or config["level"]
    effective_format = format_type if format_type is not None else config["format"]
    if enable_console is None:
        enable_console = console_config["enabled"]
    if enable_file_logging is None:
        enable_file_logging = file_config["enabled"]

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective_level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        if effective_format == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        file_handler = _rotating_file_handler(file_config)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message tagged with an explicit source.

    Args:
        logger: Logger from get_logger()
        source: One of VALID_SOURCES
        level: Log level method name (debug, info, warning, error, critical)
        message: Log message
        **kwargs: Additional context fields

    Raises:
        ValueError: If source is not in VALID_SOURCES
        AttributeError: If level is not a log level
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)

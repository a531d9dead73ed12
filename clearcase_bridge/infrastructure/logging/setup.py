# File: clearcase_bridge/infrastructure/logging/setup.py
# Purpose: Structured diagnostic logging for the bridge (separate from the operator-facing job log)
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    app_name: str = "clearcase_bridge"
) -> structlog.BoundLogger:
    """
    Setup structured logging with:
    - JSON formatting for machine parsing
    - Console handler always, size-rotated file handler when log_dir is given
    - Context variables support for tagging a job's entries

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory to store log files, or None for console only
        app_name: Application name for logger identification

    Returns:
        Configured structlog logger instance
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    json_formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger"
        }
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(json_formatter)
    console_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)

    handlers = ["console"]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / f"{app_name}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setFormatter(json_formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)
        handlers.append("file")

    logger = structlog.get_logger(app_name)
    logger.info(
        "logging_initialized",
        log_level=log_level,
        log_dir=log_dir,
        handlers=handlers
    )

    return logger


def setup_logging_from_settings(settings) -> structlog.BoundLogger:
    """Configure logging from a Settings instance"""
    return setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Optional logger name. If None, returns the root logger.

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)

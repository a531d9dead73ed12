# File: clearcase_bridge/infrastructure/logging/__init__.py
# Purpose: Diagnostic logging helpers
from clearcase_bridge.infrastructure.logging.setup import get_logger, setup_logging, setup_logging_from_settings

__all__ = ["get_logger", "setup_logging", "setup_logging_from_settings"]

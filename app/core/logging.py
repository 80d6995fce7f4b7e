"""
Logging setup.

Call configure_logging() once at startup; modules then use
logging.getLogger(__name__).
"""

import logging
import sys

from app.core.config import get_settings


class KeyValueFormatter(logging.Formatter):
    """Single-line key=value records for non-development environments."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"ts={self.formatTime(record, self.datefmt)} "
            f"level={record.levelname} logger={record.name} "
            f"msg={record.getMessage()!r}"
        )
        if record.exc_info:
            line += f" exc={self.formatException(record.exc_info)!r}"
        return line


def configure_logging() -> None:
    """Configure the root logger from settings."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if settings.is_development:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = KeyValueFormatter()
    handler.setFormatter(formatter)

    # Avoid duplicate output when the app is reloaded
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(max(log_level, logging.INFO))

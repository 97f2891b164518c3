"""
Centralized logging configuration.

All campaign builder loggers live under the ``campaign_builder`` namespace.
Handlers are attached once, either to the package logger (when an
application calls ``setup_logger()`` without a name) or to each module
logger that asks for one before the package logger is configured.
"""

import logging
import os
from typing import Optional
from pydantic import BaseModel, Field

PACKAGE_LOGGER = "campaign_builder"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    # CAMPAIGN_BUILDER_LOG_LEVEL wins over the generic LOG_LEVEL
    return os.getenv(f"CAMPAIGN_BUILDER_{name}", os.getenv(name, default))


class LogConfig(BaseModel):
    """Logging configuration, read from the environment."""
    level: str = Field(default_factory=lambda: (_env("LOG_LEVEL", "INFO") or "INFO").upper())
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[str] = Field(default_factory=lambda: _env("LOG_FILE"))


def _configured_by_package(name: str) -> bool:
    """True when ``name`` is a package module whose records reach a configured package logger."""
    if not name.startswith(PACKAGE_LOGGER + "."):
        return False
    return bool(logging.getLogger(PACKAGE_LOGGER).handlers)


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent configuration.

    Args:
        name: Logger name (usually __name__); the package logger when omitted

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name or PACKAGE_LOGGER)

    if logger.handlers or _configured_by_package(logger.name):
        return logger

    config = LogConfig()
    logger.setLevel(config.level)
    formatter = logging.Formatter(fmt=config.format, datefmt=config.date_format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file_path:
        file_handler = logging.FileHandler(config.file_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

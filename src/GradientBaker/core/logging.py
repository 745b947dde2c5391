"""Logging setup for gradient texture baking."""

import logging
import logging.handlers
import os
import threading

LOGGER_NAME = "gradient_baker"
logger = logging.getLogger(LOGGER_NAME)

# 10 MB per log file, keep 3 rotated backups
_LOG_MAX_BYTES = 10 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_lock = threading.Lock()


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    value = logging.getLevelName(str(level).upper())
    if isinstance(value, int):
        return value
    logger.warning("Invalid log level '%s', defaulting to INFO", level)
    return logging.INFO


def _rotating_file_handler(log_file: str) -> logging.Handler:
    parent = os.path.dirname(log_file)
    if parent:
        os.makedirs(parent, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=_LOG_MAX_BYTES,
        backupCount=_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    return handler


def _attach_to_package_logger(numeric_level: int, log_file: str = None):
    # The host owns the root logger; only our hierarchy is touched.
    logger.setLevel(numeric_level)
    if not log_file:
        return
    target = os.path.abspath(log_file)
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == target:
            return
    logger.addHandler(_rotating_file_handler(log_file))
    logger.info("Logging to %s", target)


def setup_logging(level: str = "INFO", log_file: str = None, force: bool = False):
    """Configure logging without clobbering host-app handlers by default.

    With no root handlers (or ``force``), configures the root logger with a
    console handler and an optional rotating file handler. Otherwise only the
    ``gradient_baker`` logger is adjusted, and a file handler is attached at
    most once per path.
    """
    numeric_level = resolve_level(level)
    with _lock:
        if not force and logging.getLogger().handlers:
            _attach_to_package_logger(numeric_level, log_file)
            return
        handlers = [logging.StreamHandler()]
        if log_file:
            handlers.append(_rotating_file_handler(log_file))
        logging.basicConfig(
            level=numeric_level, format=_LOG_FORMAT, handlers=handlers, force=force,
        )
    logger.debug("Logging initialized at %s", logging.getLevelName(numeric_level))

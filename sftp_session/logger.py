import logging
import sys
from pathlib import Path

from .config import LogConfig

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"
PACKAGE_LOGGER = "sftp_session"

# Marks handlers installed by setup_logging so a second call replaces only those
_OWNED_ATTR = "_sftp_session_handler"


def _own(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED_ATTR, True)
    return handler


def setup_logging(config: LogConfig) -> logging.Logger:
    """
    Route sftp_session's log records to a file and/or stderr.

    Only the ``sftp_session`` package logger is configured. The root logger
    and any handlers an application attached itself are left alone; calling
    this again replaces the handlers a previous call installed.

    Args:
        config: LogConfig object containing settings.

    Returns:
        The configured package logger.

    Note:
        - Unknown level names fall back to INFO.
        - With config.propagate False, records stop at the package logger
          and are not repeated by the application's root handlers.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        if getattr(handler, _OWNED_ATTR, False):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(
            _own(logging.FileHandler(log_path, mode="a", encoding="utf-8"), level, formatter)
        )

    if config.console:
        package_logger.addHandler(_own(logging.StreamHandler(sys.stderr), level, formatter))

    package_logger.propagate = config.propagate
    return package_logger

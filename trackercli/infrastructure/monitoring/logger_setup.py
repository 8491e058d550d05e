"""Logging configuration for trackercli.

Log records go to stderr so that stdout carries only command output; a log
file can be added on top. Chatty third-party loggers are capped at INFO.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# urllib3 reports every pooled connection at DEBUG
QUIET_LOGGERS = ("urllib3",)


def _attach(root_logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """(Re)configures the root logger.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        log_level: Minimum level for the root logger and its handlers.
        log_format: `logging.Formatter` format string.
        log_file: Also append records to this file; its directory is created if needed.
    """
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(log_format)
    _attach(root_logger, logging.StreamHandler(sys.stderr), log_level, formatter)

    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            _attach(root_logger, logging.FileHandler(log_path, encoding='utf-8'), log_level, formatter)
        except OSError as e:
            root_logger.error(f"Could not open log file {log_path}: {e}")
        else:
            root_logger.info(f"Writing logs to {log_path}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))

    root_logger.debug(f"Logging configured at {logging.getLevelName(log_level)}")

# tls_trust_defaults/common/logger.py
"""
Logging configuration for the tls_trust_defaults package.

Module loggers are created with `logging.getLogger(__name__)` and inherit
whatever handlers are attached to the package logger here.
"""

import logging
import sys
from pathlib import Path

from tls_trust_defaults.config import LoggingConfig

__all__: list[str] = ['PACKAGE_LOGGER_NAME', 'setup_logger']

PACKAGE_LOGGER_NAME: str = 'tls_trust_defaults'

_LOG_FORMAT: logging.Formatter = logging.Formatter(
    fmt='%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)


def setup_logger(
    logging_level: int | None = None,
    config: LoggingConfig | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Idempotent: existing handlers are removed before new ones are attached,
    so repeated calls never duplicate output.

    Args:
        logging_level: Console level used when no config is given
                      (defaults to logging.INFO).
        config: Validated logging configuration. When given, its console level
                wins over `logging_level` and a file handler is attached if
                `config.file_path` is set.

    Returns:
        The 'tls_trust_defaults' logger.

    Example:
        >>> setup_logger(logging_level=logging.DEBUG)
        >>> setup_logger(config=load_config().logging)
    """
    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_level: int
    if config is not None:
        console_level = config.console_level_number
    else:
        console_level = logging.INFO if logging_level is None else logging_level

    console_handler: logging.Handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_LOG_FORMAT)
    console_handler.setLevel(console_level)
    package_logger.addHandler(console_handler)

    effective_level: int = console_level

    file_level: int | None = config.file_level_number if config else None
    if config is not None and config.file_path is not None and file_level is not None:
        log_file_path: Path = config.file_path
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            filename=str(log_file_path),
            mode='a',
            encoding='utf-8',
        )
        file_handler.setFormatter(_LOG_FORMAT)
        file_handler.setLevel(file_level)
        package_logger.addHandler(file_handler)

        effective_level = min(console_level, file_level)

    # Logger level must admit the most verbose handler.
    package_logger.setLevel(effective_level)
    return package_logger

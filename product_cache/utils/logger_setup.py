"""Logging configuration for the product service application."""

import logging
import sys

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level=DEFAULT_LOG_LEVEL, log_format=DEFAULT_LOG_FORMAT, log_file=None):
    """
    Configure the root logger with a stdout handler and an optional file handler

    Args:
        log_level: Minimum level, e.g. logging.DEBUG
        log_format: Format string for log records
        log_file: Optional path that also receives every record
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.info(f"Logging configured. Level={logging.getLevelName(log_level)}")

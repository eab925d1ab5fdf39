#!/usr/bin/env python3
"""Unified logging configuration for the shift clock."""

import logging
import sys
import os

LEVEL_MAP = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

SYSTEM_LOGGERS = ['shift_clock', 'schedule_state', 'config_loader', 'calendar_generator', 'timeline_api']


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors and emojis for different log levels."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[0;36m',    # Cyan
        'INFO': '\033[0;32m',     # Green
        'WARNING': '\033[1;33m',  # Yellow
        'ERROR': '\033[0;31m',    # Red
        'CRITICAL': '\033[1;31m', # Bright Red
        'RESET': '\033[0m'
    }

    EMOJIS = {
        'DEBUG': '🔍',
        'INFO': '⏰',
        'WARNING': '⚠️',
        'ERROR': '❌',
        'CRITICAL': '💥'
    }

    def format(self, record):
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        emoji = self.EMOJIS.get(record.levelname, '📝')
        reset_color = self.COLORS['RESET']

        # Format: EMOJI message (no level text)
        return f"{level_color}{emoji}{reset_color} {record.getMessage()}"


def setup_logger(name: str, default_level: str = None):
    """Set up a logger with consistent formatting.

    Args:
        name: Logger name (e.g., 'schedule_state', 'calendar_generator')
        default_level: Logging level; SHIFT_CLOCK_LOG_LEVEL when omitted

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Check if already configured
    if logger.handlers:
        return logger

    level_name = default_level or get_logging_level_from_env()
    logger.setLevel(LEVEL_MAP.get(level_name.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(ColoredFormatter())

    logger.addHandler(handler)
    logger.propagate = False  # Don't propagate to root logger

    return logger


def set_logging_level(logger_name: str, level_name: str):
    """Set the logging level for a specific logger."""
    logging.getLogger(logger_name).setLevel(LEVEL_MAP.get(level_name.upper(), logging.INFO))


def set_global_logging_level(level_name: str):
    """Set logging level for all shift clock loggers.

    Args:
        level_name: 'DEBUG', 'INFO', 'WARNING', 'ERROR', or 'CRITICAL'
    """
    for logger_name in SYSTEM_LOGGERS:
        set_logging_level(logger_name, level_name)


def get_logging_level_from_env():
    """Get logging level from environment variable SHIFT_CLOCK_LOG_LEVEL."""
    return os.getenv('SHIFT_CLOCK_LOG_LEVEL', 'INFO').upper()

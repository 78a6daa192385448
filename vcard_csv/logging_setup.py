"""
Logging configuration for the vCard converter.
"""

import copy
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def format(self, record):
        """Format log record with colors."""
        log_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset_color = self.COLORS['RESET']

        # Color a copy so the file handler still sees the plain level name
        record = copy.copy(record)
        record.levelname = f"{log_color}{record.levelname}{reset_color}"

        return super().format(record)


def setup_logger(
    name: str = "vcard_csv",
    level: str = "INFO",
    log_dir: Optional[str] = "logs"
) -> logging.Logger:
    """
    Configure logger with console and file handlers.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARN, WARNING, ERROR)
        log_dir: Directory for the log file, or None to log to console only

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_formatter = ColoredFormatter(
        '%(asctime)s [%(levelname)s]: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / f"{name}.log", encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def log_progress(logger: logging.Logger, current: int, total: int, context: str = "Processing"):
    """
    Log progress information.

    Args:
        logger: Logger instance
        current: Current item number
        total: Total items
        context: Context description
    """
    percentage = (current / total * 100) if total > 0 else 0
    logger.info(f"{context}: {current}/{total} ({percentage:.1f}%)")


def log_stats(logger: logging.Logger, stats_dict: Dict[str, Any], title: str = "Statistics"):
    """
    Log statistics dictionary.

    Nested lists of dictionaries (e.g. top fields) are printed one per line.

    Args:
        logger: Logger instance
        stats_dict: Dictionary of statistics
        title: Section title
    """
    logger.info(f"=== {title} ===")
    for key, value in stats_dict.items():
        if isinstance(value, float):
            logger.info(f"  {key}: {value:.2f}")
        elif isinstance(value, list):
            logger.info(f"  {key}:")
            for item in value:
                if isinstance(item, dict):
                    logger.info("    - " + ", ".join(f"{k}={v}" for k, v in item.items()))
                else:
                    logger.info(f"    - {item}")
        else:
            logger.info(f"  {key}: {value}")
    logger.info("=" * (len(title) + 8))

"""
====================================================
Centralized logging configuration for crudgen.
====================================================

Provides consistent logging setup across the generator, the store client
and the CLI:
- Console output, colored when attached to a terminal
- Optional log file
- Module-specific loggers
- Quieting of noisy third-party loggers (SQLAlchemy engine echo)

Example:
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> setup_logging(log_level='DEBUG', log_file='crudgen.log')
    >>> logger = get_logger(__name__)
    >>> logger.debug("Generated get plan for guild")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter adding ANSI colors and a level marker to console output.

    Attributes:
        COLORS: Dict mapping log levels to ANSI color codes
        MARKERS: Dict mapping log levels to short prefix markers
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    MARKERS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🔥'
    }

    def format(self, record):
        """Format a record without mutating it for other handlers."""
        levelname = record.levelname
        colored = logging.makeLogRecord(record.__dict__)
        if levelname in self.COLORS:
            colored.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        colored.marker = self.MARKERS.get(levelname, '')
        return super().format(colored)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ of calling module)
        level: Optional logging level override (DEBUG/INFO/WARNING/ERROR/CRITICAL)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    return logger


def setup_logging(
    log_level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: Optional[bool] = None,
    sql_echo: bool = False
) -> None:
    """Configure the root logger.

    Should be called once by the entry point; library modules only
    call get_logger().

    Args:
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Optional log file name (e.g., 'crudgen.log')
        log_dir: Optional log directory path (defaults to 'logs/')
        console_output: If True, log to stderr
        use_colors: Force colored console output on or off; auto-detected
            from the stream when None
        sql_echo: If True, let SQLAlchemy log every executed statement

    Example:
        >>> setup_logging(log_level='DEBUG', log_file='crudgen.log', log_dir='logs')
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stdout is reserved for generated output
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        if use_colors is None:
            use_colors = sys.stderr.isatty()

        if use_colors:
            console_handler.setFormatter(
                ColoredFormatter('%(marker)s ' + LOG_FORMAT, datefmt=DATE_FORMAT)
            )
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir) if log_dir else Path('logs')
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if sql_echo else logging.WARNING
    )

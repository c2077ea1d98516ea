"""Logging configuration for toolgate."""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "toolgate"

LOG_FORMAT = "%(message)s"
LOG_DATE_FORMAT = "[%X]"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LevelLike = Union[int, str]


def _resolve_level(level: LevelLike) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: LevelLike = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Set up logging with a Rich handler on stderr.

    Stdout stays free for command output; diagnostics go to stderr.

    Args:
        level: Logging level as an int or a name such as "INFO"
        log_file: Optional path to a log file (always at DEBUG)
        verbose: Enable debug output with source paths

    Returns:
        The configured "toolgate" logger
    """
    level = logging.DEBUG if verbose else _resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the "toolgate" hierarchy.

    Args:
        name: Logger name (will be prefixed with 'toolgate.')
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)


def enable_debug_logging() -> None:
    """Enable debug logging for all toolgate loggers."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def disable_logging() -> None:
    """Silence toolgate logging (useful for testing)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())


class LogCapture:
    """Context manager to capture log records (useful for testing).

    Example:
        >>> with LogCapture(level=logging.DEBUG) as capture:
        ...     engine.compile()
        >>> capture.has_message("tools enabled")
        True
    """

    def __init__(self, logger_name: str = ROOT_LOGGER, level: LevelLike = logging.DEBUG):
        self.logger_name = logger_name
        self.level = _resolve_level(level)
        self.records: list[logging.LogRecord] = []
        self._handler: Optional[logging.Handler] = None
        self._previous_level = logging.NOTSET

    def __enter__(self) -> "LogCapture":
        logger = logging.getLogger(self.logger_name)
        self._previous_level = logger.level
        logger.setLevel(self.level)
        self._handler = CaptureHandler(self.records)
        logger.addHandler(self._handler)
        return self

    def __exit__(self, *args) -> None:
        logger = logging.getLogger(self.logger_name)
        if self._handler:
            logger.removeHandler(self._handler)
        logger.setLevel(self._previous_level)

    @property
    def messages(self) -> list[str]:
        """Get captured log messages."""
        return [record.getMessage() for record in self.records]

    def at_level(self, level: LevelLike) -> list[str]:
        """Messages logged at exactly this level."""
        level = _resolve_level(level)
        return [r.getMessage() for r in self.records if r.levelno == level]

    def has_message(self, substring: str) -> bool:
        """Check if any captured message contains the substring."""
        return any(substring in msg for msg in self.messages)


class CaptureHandler(logging.Handler):
    """Handler that captures log records to a list."""

    def __init__(self, records: list[logging.LogRecord]):
        super().__init__()
        self.records = records

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

"""Logging for mediablocks.

All output goes through the ``mediablocks`` logger:

- debug and info go to stdout as bare messages (debug only with --verbose)
- warnings and errors go to stderr, prefixed with ``Warning:`` / ``Error:``

The block transformer reports through :class:`ComponentLogger`, which tags
each message with the reporting component.
"""

import logging
import sys
from collections.abc import Callable

LOGGER_NAME = "mediablocks"

_logger: logging.Logger | None = None

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR


class CleanFormatter(logging.Formatter):
    """Message only, no level or timestamp."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


class PrefixFormatter(logging.Formatter):
    """Prefix warnings and errors with their capitalized level name."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno < logging.WARNING:
            return message
        return f"{record.levelname.capitalize()}: {message}"


def _stream_handler(
    stream, formatter: logging.Formatter, min_level: int, below: int | None = None
) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(min_level)
    handler.setFormatter(formatter)
    if below is not None:
        handler.addFilter(lambda record: record.levelno < below)
    return handler


def setup_logging(verbose: bool = False) -> logging.Logger:
    """(Re)configure the mediablocks logger.

    Handlers bind to the current ``sys.stdout``/``sys.stderr``, so calling
    this again after the streams were swapped (tests, click's runner) picks
    up the new ones.
    """
    global _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    stdout = _stream_handler(
        sys.stdout, CleanFormatter(), logging.DEBUG, below=logging.WARNING
    )
    logger.addHandler(stdout)
    logger.addHandler(_stream_handler(sys.stderr, PrefixFormatter(), logging.WARNING))
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """The mediablocks logger, set up with defaults on first use."""
    if _logger is None:
        return setup_logging(verbose=False)
    return _logger


def debug(msg: str) -> None:
    get_logger().debug(msg)


def info(msg: str) -> None:
    get_logger().info(msg)


def warning(msg: str) -> None:
    get_logger().warning(msg)


def error(msg: str) -> None:
    get_logger().error(msg)


class ComponentLogger:
    """Adapter exposing the ``warn/error/debug(component, ...)`` protocol.

    Messages are formatted as ``"<component>: <message>"``. Debug messages
    are zero-argument callables, evaluated only when debug output is enabled.

    Args:
        logger: Logger to write to; defaults to the mediablocks logger,
            looked up on each call
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger or get_logger()

    def warn(self, component: str, message: str) -> None:
        self.logger.warning(f"{component}: {message}")

    def error(self, component: str, message: str) -> None:
        self.logger.error(f"{component}: {message}")

    def info(self, component: str, message: str) -> None:
        self.logger.info(f"{component}: {message}")

    def debug(self, component: str, message: Callable[[], str]) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"{component}: {message()}")

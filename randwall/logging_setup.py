"""Logging setup and utilities."""

import logging
import os

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]


class _DebugState:
    """Container for mutable debug state to avoid global statement."""

    value: bool = bool(os.environ.get("DEBUG"))


_debug_state = _DebugState()


def is_debug() -> bool:
    """Return the current debug state."""
    return _debug_state.value


def set_debug(value: bool) -> None:
    """Set the debug state."""
    _debug_state.value = value


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Handlers are only created once: later calls can still force debug mode.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)
    if LogObjects.handlers:
        return

    class ScreenLogFormatter(logging.Formatter):
        """A custom formatter, adding colors based on log level.

        Colors are disabled when NO_COLOR is set.
        """

        LOG_FORMAT = r"%(name)25s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        RESET_ANSI = "\x1b[0m"

        def __init__(self) -> None:
            super().__init__()
            if os.environ.get("NO_COLOR"):
                warn_pre = err_pre = crit_pre = suffix = ""
            else:
                warn_pre, err_pre, crit_pre, suffix = "\x1b[33;20m", "\x1b[31;20m", "\x1b[31;1m", self.RESET_ANSI

            self._formatters = {
                logging.DEBUG: logging.Formatter(self.LOG_FORMAT),
                logging.INFO: logging.Formatter(self.LOG_FORMAT),
                logging.WARNING: logging.Formatter(warn_pre + self.LOG_FORMAT + suffix),
                logging.ERROR: logging.Formatter(err_pre + self.LOG_FORMAT + suffix),
                logging.CRITICAL: logging.Formatter(crit_pre + self.LOG_FORMAT + suffix),
            }

        def format(self, record: logging.LogRecord) -> str:
            return self._formatters[record.levelno].format(record)

    logging.basicConfig()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "randwall", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger

"""Logging for splfl.

All modules log through children of the ``splfl`` logger obtained with
:func:`get_logger`. The package logger owns a single stderr handler, since
stdout is reserved for reports and CLI status lines.

Worker processes of the exhaustive search do not inherit the parent's logger
configuration under the ``spawn`` start method; the parent exports its level
with :func:`export_log_level` and each worker applies it with
:func:`apply_env_log_level`. Long searches report progress through
:class:`ProgressLogger`.
"""

import logging
import os
import sys
from typing import Optional

# Flag to track if we've already set up the package logger
_ROOT_LOGGER_CONFIGURED = False

_ROOT_LOGGER_NAME = "splfl"

#: Environment variable carrying the log level name into worker processes.
LOG_LEVEL_ENV = "SPLFL_LOG_LEVEL"

_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Configure the ``splfl`` logger once.

    Later calls are no-ops until :func:`reset_logging` is called.

    Args:
        level: Logging level (default: INFO).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to StreamHandler on stderr).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    package_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    # Propagate so pytest's caplog sees package records
    package_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that inherits the ``splfl`` configuration.

    Args:
        name: Logger name (typically ``__name__`` of the calling module).
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the ``splfl`` logger and its handlers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    setup_root_logger()

    package_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Switch the package to DEBUG."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Switch the package back to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler and level (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    package_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


def export_log_level() -> str:
    """Store the effective package level in :data:`LOG_LEVEL_ENV`.

    Returns:
        The exported level name (e.g. ``"INFO"``).
    """
    level = logging.getLogger(_ROOT_LOGGER_NAME).getEffectiveLevel()
    name = logging.getLevelName(level)
    os.environ[LOG_LEVEL_ENV] = name
    return name


def apply_env_log_level() -> Optional[int]:
    """Apply the level named in :data:`LOG_LEVEL_ENV`, if any.

    Unknown names fall back to INFO.

    Returns:
        The applied level, or None when the variable is unset.
    """
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not env_level:
        return None
    level = getattr(logging, env_level.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    set_global_log_level(level)
    return level


class ProgressLogger:
    """Log ``done/total`` at INFO about every tenth of the work.

    Example:
        progress = ProgressLogger(logger, "Serial search", 255, "IDs evaluated")
        progress.update(26)  # "Serial search progress: 26/255 IDs evaluated"
    """

    def __init__(
        self,
        logger: logging.Logger,
        label: str,
        total: int,
        unit: str,
        steps: int = 10,
    ) -> None:
        self.logger = logger
        self.label = label
        self.total = total
        self.unit = unit
        self._step = max(1, -(-total // steps))
        self._next = self._step

    def update(self, done: int) -> None:
        """Record progress; logs when ``done`` crosses the next step."""
        if done < self._next and done < self.total:
            return
        self.logger.info(f"{self.label} progress: {done}/{self.total} {self.unit}")
        while self._next <= done:
            self._next += self._step


# Configure the package logger on import
setup_root_logger()

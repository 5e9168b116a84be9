"""Process-wide configuration for conjoin.

This module holds the error sink every join reports to unless told
otherwise, and the switch for per-join event logging.

Environment variables (read when the configuration is first built and on
:meth:`GlobalConfig.reset`):

- ``CONJOIN_DEBUG``: log ``join.start``/``join.end`` events at DEBUG.
- ``CONJOIN_LOG_FAILURES``: set to a false value (``0``, ``false``, ``no``)
  to start with failure reporting disabled.
"""

from __future__ import annotations

import contextlib
import logging
import os
import threading
from typing import Iterator, Optional

from .reporting import ErrorSink, LoggingErrorSink

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Ignoring unrecognised value %r for %s", value, name)
    return default


class ConfigRegistry(type):
    """Metaclass implementing singleton pattern for GlobalConfig.

    Ensures only one instance of GlobalConfig exists throughout the application.
    """
    _instance = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class GlobalConfig(metaclass=ConfigRegistry):
    """Global configuration manager for joins.

    Attributes:
        log_events: Whether each join logs its start and end at DEBUG.
    """

    def __init__(self):
        """Initialize the configuration from the environment."""
        self._lock = threading.Lock()
        self._load_defaults()

    def _load_defaults(self) -> None:
        self.log_events: bool = _env_flag("CONJOIN_DEBUG", False)
        self._error_sink: Optional[ErrorSink] = (
            LoggingErrorSink() if _env_flag("CONJOIN_LOG_FAILURES", True) else None
        )

    @property
    def error_sink(self) -> Optional[ErrorSink]:
        """The sink failed joins are reported to, or None when disabled."""
        with self._lock:
            return self._error_sink

    def set_error_sink(self, sink: Optional[ErrorSink]) -> Optional[ErrorSink]:
        """Install ``sink`` and return the previous one.

        Args:
            sink: A callable taking a JoinFailure, or None to disable reporting.

        Raises:
            TypeError: If sink is neither callable nor None.
        """
        if sink is not None and not callable(sink):
            raise TypeError(f"error sink must be callable or None, got {sink!r}")
        with self._lock:
            previous, self._error_sink = self._error_sink, sink
        return previous

    def reset(self) -> None:
        """Restore the environment-derived defaults."""
        with self._lock:
            self._load_defaults()

    def __repr__(self) -> str:
        return f"GlobalConfig(error_sink={self._error_sink!r}, log_events={self.log_events})"


global_config = GlobalConfig()


def get_error_sink() -> Optional[ErrorSink]:
    return global_config.error_sink


def set_error_sink(sink: Optional[ErrorSink]) -> Optional[ErrorSink]:
    return global_config.set_error_sink(sink)


def reset_error_sink() -> None:
    """Put the default logging sink back, whatever the environment says."""
    global_config.set_error_sink(LoggingErrorSink())


@contextlib.contextmanager
def error_sink(sink: Optional[ErrorSink]) -> Iterator[Optional[ErrorSink]]:
    """Temporarily install ``sink`` as the process-wide error sink.

    Example:
        >>> with error_sink(None):
        ...     ...  # failed joins are not reported here
    """
    previous = set_error_sink(sink)
    try:
        yield sink
    finally:
        set_error_sink(previous)

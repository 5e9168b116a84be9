"""Error sinks: where failed joins are reported.

A sink is any callable taking a single :class:`~conjoin.exceptions.JoinFailure`.
Reporting is observational only; the future returned by a join fails whether
or not a sink is installed and whatever the sink does.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .exceptions import JoinFailure

ErrorSink = Callable[[JoinFailure], None]

logger = logging.getLogger(__name__)


class LoggingErrorSink:
    """Default sink: log the failure with its original traceback.

    Args:
        logger: Logger to write to. Defaults to the ``"conjoin"`` logger.
        level: Logging level used for the record.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR):
        self.logger = logger if logger is not None else logging.getLogger("conjoin")
        self.level = level

    def __call__(self, failure: JoinFailure) -> None:
        reason = failure.reason
        self.logger.log(
            self.level,
            "join.failure origin=%s name=%s type=%s msg=%s",
            failure.origin,
            failure.name,
            type(reason).__name__,
            reason,
            exc_info=(type(reason), reason, reason.__traceback__),
        )

    def __repr__(self) -> str:
        return f"LoggingErrorSink(logger={self.logger.name}, level={logging.getLevelName(self.level)})"


class CollectingErrorSink:
    """Sink that keeps every reported failure in ``failures``."""

    def __init__(self) -> None:
        self.failures: list = []

    def __call__(self, failure: JoinFailure) -> None:
        self.failures.append(failure)

    def clear(self) -> None:
        self.failures.clear()


def report(failure: JoinFailure, sink: Optional[ErrorSink]) -> None:
    """Hand ``failure`` to ``sink``; a raising sink is logged, never propagated."""
    if sink is None:
        return
    try:
        sink(failure)
    except Exception:  # pylint: disable=broad-except
        logger.exception("sink.error sink=%r failure=%s", sink, failure)

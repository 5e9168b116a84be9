"""The ``join`` combinator.

``join(f_1, ..., f_n, continuation)`` waits for every input and then calls
``continuation(v_1, ..., v_n)`` with the resolved values spread positionally,
in input order. It returns a future of the continuation's result straight
away, so dependency graphs can be written declaratively:

    >>> flour = loop.create_task(buy("flour"))
    >>> eggs = loop.create_task(buy("eggs"))
    >>> batter = join(flour, eggs, mix)
    >>> crepe = join(batter, pan, cook)

Failures travel to the returned future as the original exception and are
also reported to the error sink (see :mod:`conjoin.config`).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Iterable, Optional, Type

from .config import global_config
from .exceptions import ContinuationFailure, InputFailure
from .futures import all_of, settle
from .reporting import ErrorSink, report

logger = logging.getLogger(__name__)

# Marks "use the process-wide sink" since None already means "no sink".
_UNSET: Any = object()


def describe(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def join(
    *args: Any,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    on_error: Optional[ErrorSink] = _UNSET,
) -> asyncio.Future:
    """Call the last positional argument with the values of all the others.

    Args:
        *args: Zero or more future-likes followed by the continuation.
        loop: Event loop the returned future belongs to. Defaults to the
              running loop.
        on_error: Error sink for this call only; None disables reporting.

    Returns:
        A future of the continuation's result, flattened one level when the
        continuation returns a future-like.

    Raises:
        TypeError: If no continuation is given or it is not callable.
        RuntimeError: If ``loop`` is omitted and no event loop is running.

    Example:
        >>> await join(resolved(2), resolved(3), lambda a, b: a + b)
        5
    """
    if not args:
        raise TypeError("join() needs a continuation as its last positional argument")
    *inputs, continuation = args
    return join_all(inputs, continuation, loop=loop, on_error=on_error)


def join_all(
    inputs: Iterable[Any],
    continuation: Callable[..., Any],
    *,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    on_error: Optional[ErrorSink] = _UNSET,
) -> asyncio.Future:
    """Same as :func:`join` with the inputs given as one sequence."""
    return _join(inputs, continuation, loop=loop, on_error=on_error)


def after(
    *inputs: Any,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    on_error: Optional[ErrorSink] = _UNSET,
) -> Callable[[Callable[..., Any]], asyncio.Future]:
    """Decorator form of :func:`join`; the decorated name becomes the future.

    Example:
        >>> @after(flour, eggs)
        ... def batter(flour, eggs):
        ...     return mix(flour, eggs)
    """

    def _(continuation: Callable[..., Any]) -> asyncio.Future:
        return join_all(inputs, continuation, loop=loop, on_error=on_error)

    return _


def check_call(continuation: Callable[..., Any], on_error: Optional[ErrorSink]) -> None:
    """Raise TypeError for a call shape no join accepts."""
    if not callable(continuation):
        raise TypeError(f"join continuation must be callable, got {continuation!r}")
    if on_error is not _UNSET and on_error is not None and not callable(on_error):
        raise TypeError(f"on_error must be callable or None, got {on_error!r}")


def _join(
    inputs: Iterable[Any],
    continuation: Callable[..., Any],
    *,
    loop: Optional[asyncio.AbstractEventLoop],
    on_error: Optional[ErrorSink],
    input_failure: Type[InputFailure] = InputFailure,
    name: Optional[str] = None,
) -> asyncio.Future:
    check_call(continuation, on_error)
    sink = global_config.error_sink if on_error is _UNSET else on_error

    loop = loop if loop is not None else asyncio.get_running_loop()
    name = name or describe(continuation)
    aggregate = all_of(inputs, loop=loop)
    return loop.create_task(
        _resolve(aggregate, continuation, loop, sink, input_failure, name),
        name=f"join:{name}",
    )


async def _resolve(
    aggregate: Awaitable[list],
    continuation: Callable[..., Any],
    loop: asyncio.AbstractEventLoop,
    sink: Optional[ErrorSink],
    input_failure: Type[InputFailure],
    name: str,
) -> Any:
    log_events = global_config.log_events
    start = time.time()
    if log_events:
        logger.debug("join.start name=%s", name)
    try:
        try:
            values = await aggregate
        except Exception as exc:
            report(input_failure(exc, name), sink)
            raise
        try:
            return await settle(continuation(*values), loop=loop)
        except Exception as exc:
            report(ContinuationFailure(exc, name), sink)
            raise
    finally:
        if log_events:
            logger.debug("join.end name=%s elapsed=%.6fs", name, time.time() - start)

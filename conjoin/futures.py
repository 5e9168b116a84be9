"""Adapters between future-like values and asyncio futures.

``as_future`` is the single place deciding what counts as a future-like:

- an ``asyncio.Future`` (or ``Task``) is used as is,
- a ``concurrent.futures.Future`` is wrapped with ``asyncio.wrap_future``,
- any other awaitable (coroutines included) is scheduled as a task,
- anything else is a plain value and becomes an already-resolved future.

Extra types can be supported by registering another implementation of
``as_future`` in this module's dispatch namespace.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from collections.abc import Awaitable
from functools import partial
from typing import Any, Dict, Iterable, Optional

from multipledispatch import dispatch

from .exceptions import Rejection

namespace: Dict[str, Any] = {}

dispatch = partial(dispatch, namespace=namespace)


def _get_loop(loop: Optional[asyncio.AbstractEventLoop]) -> asyncio.AbstractEventLoop:
    return loop if loop is not None else asyncio.get_running_loop()


@dispatch(asyncio.Future)
def as_future(value, loop=None):
    return value


@dispatch(concurrent.futures.Future)  # noqa: F811
def as_future(value, loop=None):
    return asyncio.wrap_future(value, loop=_get_loop(loop))


@dispatch(Awaitable)  # noqa: F811
def as_future(value, loop=None):
    return asyncio.ensure_future(value, loop=_get_loop(loop))


@dispatch(object)  # noqa: F811
def as_future(value, loop=None):
    return resolved(value, loop=loop)


def is_future_like(value: Any) -> bool:
    """True for anything ``as_future`` would not treat as a plain value."""
    return inspect.isawaitable(value) or isinstance(value, concurrent.futures.Future)


def resolved(value: Any, *, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Future:
    """Return a future already settled with ``value``."""
    fut = _get_loop(loop).create_future()
    fut.set_result(value)
    return fut


def rejected(reason: Any, *, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Future:
    """Return a future already failed with ``reason``.

    Exceptions are used as they are; any other reason is wrapped in a
    :class:`Rejection` that keeps it in ``.reason``.
    """
    if not isinstance(reason, BaseException):
        reason = Rejection(reason)
    fut = _get_loop(loop).create_future()
    fut.set_exception(reason)
    return fut


def all_of(inputs: Iterable[Any], *, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Future:
    """Aggregate ``inputs`` into a future of the ordered list of their values.

    Fails with the first failure among the inputs without waiting for the
    others. Inputs are shielded, so neither that failure nor cancelling the
    aggregate ever cancels an input (they may be shared with other joins).
    """
    children = [asyncio.shield(as_future(value, loop=loop)) for value in inputs]
    if not children:
        return resolved([], loop=loop)
    return asyncio.gather(*children)


async def settle(value: Any, *, loop: Optional[asyncio.AbstractEventLoop] = None) -> Any:
    """Await ``value`` once if it is future-like, otherwise return it unchanged."""
    if is_future_like(value):
        return await as_future(value, loop=loop)
    return value

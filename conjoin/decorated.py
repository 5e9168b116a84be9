"""Join variants that transform every input first.

``decorated_join(load)`` gives a function called exactly like ``join`` that
runs ``load`` on each input (never on the trailing continuation) and joins
the results:

    >>> join_loaded = decorated_join(load)
    >>> join_loaded("vertex.glsl", "fragment.glsl", link_program)
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, List, Optional

from .core import _UNSET, _join, check_call, describe, join
from .exceptions import DecoratorFailure
from .futures import rejected, settle
from .reporting import ErrorSink

Decorator = Callable[[Any], Any]
JoinLike = Callable[..., asyncio.Future]


class DecoratedJoin:
    """A join that maps ``decorator`` over its inputs before joining.

    Attributes:
        decorator: Raw input -> future-like of the value the continuation sees.
        base: Join-shaped callable the decorated inputs are handed to, or None
              for the plain join.
    """

    def __init__(self, decorator: Decorator, base: Optional[JoinLike] = None, name: Optional[str] = None):
        if not callable(decorator):
            raise TypeError(f"decorator must be callable, got {decorator!r}")
        if base is not None and not callable(base):
            raise TypeError(f"base must be a join-shaped callable, got {base!r}")
        self.decorator = decorator
        self.base = base
        self.__name__ = self.__qualname__ = name or f"join_{describe(decorator)}"

    def __call__(
        self,
        *args: Any,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_error: Optional[ErrorSink] = _UNSET,
    ) -> asyncio.Future:
        if not args:
            raise TypeError(f"{self.__name__}() needs a continuation as its last positional argument")
        *inputs, continuation = args
        return self.join_all(inputs, continuation, loop=loop, on_error=on_error)

    def join_all(
        self,
        inputs: Iterable[Any],
        continuation: Callable[..., Any],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_error: Optional[ErrorSink] = _UNSET,
    ) -> asyncio.Future:
        check_call(continuation, on_error)
        loop = loop if loop is not None else asyncio.get_running_loop()
        decorated = self._decorate_all(inputs, loop)
        if self.base is not None:
            options = {"loop": loop}
            if on_error is not _UNSET:
                options["on_error"] = on_error
            return self.base(*decorated, continuation, **options)
        return _join(
            decorated,
            continuation,
            loop=loop,
            on_error=on_error,
            input_failure=DecoratorFailure,
            name=f"{self.__name__}:{describe(continuation)}",
        )

    def _decorate_all(self, inputs: Iterable[Any], loop: asyncio.AbstractEventLoop) -> List[Any]:
        decorated = []
        for value in inputs:
            try:
                decorated.append(self.decorator(value))
            except Exception as exc:
                # A raising decorator fails its own slot like any failed input.
                decorated.append(rejected(exc, loop=loop))
        return decorated

    def __repr__(self) -> str:
        return f"DecoratedJoin({self.__name__}, base={self.base!r})"


def decorated_join(
    decorator: Decorator,
    *,
    base: JoinLike = join,
    name: Optional[str] = None,
) -> DecoratedJoin:
    """Build a join variant applying ``decorator`` to every input.

    Args:
        decorator: Function from a raw input to a future-like; coroutine
                   functions work too.
        base: Join-shaped callable to delegate to: ``join``, another decorated
              join, or anything called like ``join`` that accepts ``loop=``.
              With a decorated base, ``decorator`` runs first and the base's
              decorator receives its resolved output.
        name: Name of the produced function.

    Raises:
        TypeError: If decorator or base is not callable.
    """
    if base is join:
        return DecoratedJoin(decorator, name=name)
    if isinstance(base, DecoratedJoin):
        # Fold the chain so each decorator sees the previous one's value.
        return DecoratedJoin(
            compose_decorators(decorator, base.decorator),
            base=base.base,
            name=name or f"join_{describe(decorator)}",
        )
    return DecoratedJoin(decorator, base=base, name=name)


def compose_decorators(*decorators: Decorator) -> Decorator:
    """Chain decorators: each one receives the resolved output of the previous."""
    if not decorators:
        raise ValueError("compose_decorators() needs at least one decorator")
    for decorator in decorators:
        if not callable(decorator):
            raise TypeError(f"decorator must be callable, got {decorator!r}")

    async def composed(value: Any) -> Any:
        for decorator in decorators:
            value = await settle(decorator(value))
        return value

    composed.__name__ = composed.__qualname__ = "_then_".join(describe(d) for d in decorators)
    return composed

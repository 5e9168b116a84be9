# coding: utf-8
"""
Public subclasses of different Exceptions
"""


class ConjoinException(Exception):
    """Base class for conjoin exceptions"""

    pass


class Rejection(ConjoinException):
    """A future rejected with a reason that is not an exception.

    The original reason is kept untouched in ``reason``.
    """

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class JoinFailure(ConjoinException):
    """A join did not produce a value.

    Instances are what the error sink receives. The future returned by the
    join fails with ``reason`` itself, never with this wrapper.
    """

    origin = "join"

    def __init__(self, reason: BaseException, name: str = "<join>"):
        super().__init__(reason)
        self.reason = reason
        self.name = name
        self.__cause__ = reason

    def __str__(self) -> str:
        return f"{self.origin} failure in {self.name}: {self.reason!r}"


class InputFailure(JoinFailure):
    """One of the inputs of a join failed (first failure wins)."""

    origin = "input"


class DecoratorFailure(InputFailure):
    """A decorator of a decorated join failed to produce its input."""

    origin = "decorator"


class ContinuationFailure(JoinFailure):
    """The continuation raised or returned a failed future."""

    origin = "continuation"

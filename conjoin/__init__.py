"""Join asyncio futures into continuations that take their values positionally."""

from .config import GlobalConfig, error_sink, get_error_sink, global_config, reset_error_sink, set_error_sink
from .core import after, join, join_all
from .decorated import DecoratedJoin, compose_decorators, decorated_join
from .exceptions import (
    ConjoinException,
    ContinuationFailure,
    DecoratorFailure,
    InputFailure,
    JoinFailure,
    Rejection,
)
from .futures import all_of, as_future, is_future_like, rejected, resolved, settle
from .reporting import CollectingErrorSink, LoggingErrorSink

__version__ = "0.1.0"

__all__ = [
    "join",
    "join_all",
    "after",
    # decorated joins
    "decorated_join",
    "DecoratedJoin",
    "compose_decorators",
    # futures
    "as_future",
    "is_future_like",
    "resolved",
    "rejected",
    "all_of",
    "settle",
    # errors
    "ConjoinException",
    "JoinFailure",
    "InputFailure",
    "DecoratorFailure",
    "ContinuationFailure",
    "Rejection",
    # error sinks and configuration
    "LoggingErrorSink",
    "CollectingErrorSink",
    "GlobalConfig",
    "global_config",
    "get_error_sink",
    "set_error_sink",
    "reset_error_sink",
    "error_sink",
]

"""Error kinds raised by the iteration engine."""

from typing import Optional


class LazySeqError(Exception):
    """Base class for all iteration engine errors."""


class ComputationFailure(LazySeqError):
    """A coroutine body or a combinator function raised while advancing.

    The original exception is available as ``cause`` and is also chained
    as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class NonTermination(LazySeqError):
    """An eager consumer exceeded its safety bound without reaching the end."""

    def __init__(self, limit: int):
        super().__init__(
            f"Sequence did not terminate within {limit:,} items. "
            f"Pass a larger limit or bound the sequence with take()."
        )
        self.limit = limit


class InvalidArgument(LazySeqError, ValueError):
    """A constructor or consumer received an invalid parameter."""

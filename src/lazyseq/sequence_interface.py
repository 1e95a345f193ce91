"""Abstract interfaces for cursors and sequences."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from .errors import ComputationFailure
from .models import FINISHED, Step

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Cursor(ABC, Generic[T]):
    """Stateful producer of Steps.

    A cursor is owned by exactly one consumer at a time and provides no
    internal synchronization. Subclasses implement ``_advance``; the base
    class enforces terminal idempotence and turns unexpected exceptions
    into ComputationFailure.
    """

    def __init__(self):
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        """True once the cursor has reached its terminal state."""
        return self._exhausted

    def advance(self, resume: Any = None) -> Step:
        """Produce the next Step.

        Args:
            resume: Optional value delivered to the point where the
                underlying computation is suspended

        Returns:
            The next Step; once a done Step has been returned, every
            later call returns ``Step(EMPTY, done=True)``

        Raises:
            ComputationFailure: If the underlying computation failed. The
                failure is raised once and the cursor becomes terminal.
        """
        if self._exhausted:
            return FINISHED

        try:
            step = self._advance(resume)
        except ComputationFailure:
            self._terminate_after_failure()
            raise
        except Exception as e:
            self._terminate_after_failure()
            logger.warning(f"{type(self).__name__} failed while advancing: {e!r}")
            raise ComputationFailure(f"{type(self).__name__} failed: {e}", cause=e) from e

        if step.done:
            self._terminate()
        return step

    @abstractmethod
    def _advance(self, resume: Any) -> Step:
        """Compute the next Step. Only called while the cursor is live."""
        pass

    def _release(self) -> None:
        """Release resources held by the cursor (inner cursors, files)."""
        pass

    def _terminate(self) -> None:
        self._exhausted = True
        self._release()

    def _terminate_after_failure(self) -> None:
        # The failure being raised takes precedence over cleanup errors.
        try:
            self._terminate()
        except Exception as e:
            logger.warning(f"{type(self).__name__} cleanup after failure also failed: {e!r}")

    def close(self) -> None:
        """Abandon the cursor and run any pending cleanup.

        Idempotent. After closing, ``advance`` returns a done Step.
        """
        if self._exhausted:
            return
        self._terminate()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __iter__(self):
        return self

    def __next__(self):
        step = self.advance()
        if step.done:
            raise StopIteration(step.value)
        return step.value


class Sequence(ABC, Generic[T]):
    """Factory of independent cursors.

    A sequence owns no progression state, so it can be reused and shared
    freely; every call to ``cursor`` returns a freshly initialized cursor.
    """

    @abstractmethod
    def cursor(self) -> Cursor[T]:
        """Create a new, independent cursor over this sequence."""
        pass

    @property
    def is_finite(self) -> bool:
        """True only when the sequence is statically known to terminate."""
        return False

    def __iter__(self):
        """Bridge to native iteration by driving a fresh cursor."""
        return iter(self.cursor())

    # Fluent composition. Imports are local because combinators depend on
    # this module.

    def map(self, fn: Callable[[T], Any]) -> "Sequence":
        from .combinators import map_seq

        return map_seq(self, fn)

    def filter(self, predicate: Callable[[T], bool]) -> "Sequence[T]":
        from .combinators import filter_seq

        return filter_seq(self, predicate)

    def take(self, count: int) -> "Sequence[T]":
        from .combinators import take

        return take(self, count)

    def zip(self, other: "Sequence") -> "Sequence":
        from .combinators import zip_seq

        return zip_seq(self, other)

    def batch(self, size: int) -> "Sequence":
        from .combinators import batch

        return batch(self, size)

    def chain(self, *others: "Sequence") -> "Sequence":
        from .combinators import chain

        return chain(self, *others)

    def collect(self, limit=None) -> list:
        from .consumers import collect

        return collect(self, limit)

"""Leaf sequences built from Python values."""

from collections.abc import Sized
from typing import Any, Iterable, Iterator, Optional

from .errors import InvalidArgument
from .models import FINISHED, Step
from .sequence_interface import Cursor, Sequence


class IteratorCursor(Cursor):
    """Cursor over a native Python iterator. Resume values are ignored."""

    def __init__(self, iterator: Iterator):
        super().__init__()
        self._iterator = iterator

    def _advance(self, resume: Any) -> Step:
        try:
            return Step.item(next(self._iterator))
        except StopIteration:
            return FINISHED

    def _release(self) -> None:
        self._iterator = iter(())


class IterableSequence(Sequence):
    """
    Sequence over a re-iterable collection (list, tuple, range, dict, ...).

    One-shot iterators are rejected: a cursor obtained from this sequence
    must not affect any other cursor.
    """

    def __init__(self, items: Iterable):
        """
        Initialize iterable sequence.

        Args:
            items: Collection re-iterated by every cursor

        Raises:
            InvalidArgument: If ``items`` is not iterable or is a one-shot iterator
        """
        try:
            iterator = iter(items)
        except TypeError as e:
            raise InvalidArgument(f"Expected an iterable, got {type(items).__name__}") from e
        if iterator is items:
            raise InvalidArgument(
                "One-shot iterators cannot back a Sequence; pass a collection "
                "or wrap a generator function with CoroutineSequence"
            )
        self._items = items

    @property
    def is_finite(self) -> bool:
        return isinstance(self._items, Sized)

    def cursor(self) -> IteratorCursor:
        return IteratorCursor(iter(self._items))

    def __repr__(self):
        return f"IterableSequence({self._items!r})"


class CounterCursor(Cursor):
    def __init__(self, start, step):
        super().__init__()
        self._next = start
        self._step = step

    def _advance(self, resume: Any) -> Step:
        value = self._next
        self._next += self._step
        return Step.item(value)


class CounterSequence(Sequence):
    """Infinite arithmetic progression ``start, start + step, ...``."""

    def __init__(self, start=0, step=1):
        self.start = start
        self.step = step

    def cursor(self) -> CounterCursor:
        return CounterCursor(self.start, self.step)

    def __repr__(self):
        return f"CounterSequence(start={self.start!r}, step={self.step!r})"


class RepeatCursor(Cursor):
    def __init__(self, value, times: Optional[int]):
        super().__init__()
        self._value = value
        self._remaining = times

    def _advance(self, resume: Any) -> Step:
        if self._remaining is not None:
            if self._remaining <= 0:
                return FINISHED
            self._remaining -= 1
        return Step.item(self._value)


class RepeatSequence(Sequence):
    """The same value, ``times`` times or forever."""

    def __init__(self, value: Any, times: Optional[int] = None):
        if times is not None and (isinstance(times, bool) or not isinstance(times, int) or times < 0):
            raise InvalidArgument(f"times must be a non-negative integer or None, got {times!r}")
        self.value = value
        self.times = times

    @property
    def is_finite(self) -> bool:
        return self.times is not None

    def cursor(self) -> RepeatCursor:
        return RepeatCursor(self.value, self.times)


def from_iterable(items: Iterable) -> IterableSequence:
    """Create a sequence over a re-iterable collection."""
    return IterableSequence(items)


def count_from(start=0, step=1) -> CounterSequence:
    """Create an infinite counter sequence."""
    return CounterSequence(start, step)


def repeat(value: Any, times: Optional[int] = None) -> RepeatSequence:
    """Create a sequence repeating ``value``."""
    return RepeatSequence(value, times)

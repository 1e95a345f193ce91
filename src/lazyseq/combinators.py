"""Lazy combinators wrapping sequences.

Each combinator is a stateless Sequence holding the wrapped sequence(s)
and its function. Per-iteration state (counters, partner cursors,
buffers) lives in the cursor it creates, so one combinator can serve any
number of independent consumers.
"""

from typing import Any, Callable, List, Optional, Tuple

from .errors import InvalidArgument
from .models import FINISHED, Step
from .sequence_interface import Cursor, Sequence


def ensure_sequence(obj: Any, name: str = "sequence") -> Sequence:
    """Validate that ``obj`` implements the Sequence interface."""
    if not isinstance(obj, Sequence):
        raise InvalidArgument(f"{name} must be a Sequence, got {type(obj).__name__}")
    return obj


def _ensure_callable(obj: Any, name: str) -> Callable:
    if not callable(obj):
        raise InvalidArgument(f"{name} must be callable, got {type(obj).__name__}")
    return obj


def _ensure_count(value: Any, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        qualifier = "non-negative" if minimum == 0 else "positive"
        raise InvalidArgument(f"{name} must be a {qualifier} integer, got {value!r}")
    return value


# ============================================================================
# map
# ============================================================================


class MapCursor(Cursor):
    def __init__(self, inner: Cursor, fn: Callable):
        super().__init__()
        self._inner = inner
        self._fn = fn

    def _advance(self, resume: Any) -> Step:
        step = self._inner.advance(resume)
        if step.done:
            return step
        return Step.item(self._fn(step.value))

    def _release(self) -> None:
        self._inner.close()


class MapSequence(Sequence):
    """Applies ``fn`` to every element of ``source``."""

    def __init__(self, source: Sequence, fn: Callable):
        self.source = ensure_sequence(source, "source")
        self.fn = _ensure_callable(fn, "fn")

    @property
    def is_finite(self) -> bool:
        return self.source.is_finite

    def cursor(self) -> MapCursor:
        return MapCursor(self.source.cursor(), self.fn)


# ============================================================================
# filter
# ============================================================================


class FilterCursor(Cursor):
    def __init__(self, inner: Cursor, predicate: Callable):
        super().__init__()
        self._inner = inner
        self._predicate = predicate

    def _advance(self, resume: Any) -> Step:
        step = self._inner.advance(resume)
        while not step.done and not self._predicate(step.value):
            step = self._inner.advance()
        return step

    def _release(self) -> None:
        self._inner.close()


class FilterSequence(Sequence):
    """Keeps the elements of ``source`` for which ``predicate`` is true."""

    def __init__(self, source: Sequence, predicate: Callable):
        self.source = ensure_sequence(source, "source")
        self.predicate = _ensure_callable(predicate, "predicate")

    @property
    def is_finite(self) -> bool:
        return self.source.is_finite

    def cursor(self) -> FilterCursor:
        return FilterCursor(self.source.cursor(), self.predicate)


# ============================================================================
# take
# ============================================================================


class TakeCursor(Cursor):
    """Yields at most ``count`` elements; never over-drives the inner cursor."""

    def __init__(self, inner: Cursor, count: int):
        super().__init__()
        self._inner = inner
        self._remaining = count

    def _advance(self, resume: Any) -> Step:
        if self._remaining <= 0:
            return FINISHED
        step = self._inner.advance(resume)
        if not step.done:
            self._remaining -= 1
        return step

    def _release(self) -> None:
        self._inner.close()


class TakeSequence(Sequence):
    """The first ``count`` elements of ``source``."""

    def __init__(self, source: Sequence, count: int):
        self.source = ensure_sequence(source, "source")
        self.count = _ensure_count(count, "count", minimum=0)

    @property
    def is_finite(self) -> bool:
        return True

    def cursor(self) -> TakeCursor:
        return TakeCursor(self.source.cursor(), self.count)


# ============================================================================
# zip
# ============================================================================


class ZipCursor(Cursor):
    def __init__(self, left: Cursor, right: Cursor):
        super().__init__()
        self._left = left
        self._right = right

    def _advance(self, resume: Any) -> Step:
        # The partner is pulled first: once it ends, the primary cursor is
        # left exactly where the last pair was taken from.
        right = self._right.advance(resume)
        if right.done:
            return FINISHED
        left = self._left.advance(resume)
        if left.done:
            return FINISHED
        return Step.item((left.value, right.value))

    def _release(self) -> None:
        try:
            self._left.close()
        finally:
            self._right.close()


class ZipSequence(Sequence):
    """Pairs elements of two sequences; ends with the shorter one."""

    def __init__(self, left: Sequence, right: Sequence):
        self.left = ensure_sequence(left, "left")
        self.right = ensure_sequence(right, "right")

    @property
    def is_finite(self) -> bool:
        return self.left.is_finite or self.right.is_finite

    def cursor(self) -> ZipCursor:
        return ZipCursor(self.left.cursor(), self.right.cursor())


# ============================================================================
# batch
# ============================================================================


class BatchCursor(Cursor):
    def __init__(self, inner: Cursor, size: int):
        super().__init__()
        self._inner = inner
        self._size = size
        self._inner_done = False

    def _advance(self, resume: Any) -> Step:
        if self._inner_done:
            return FINISHED

        batch: List = []
        step = self._inner.advance(resume)
        while not step.done:
            batch.append(step.value)
            if len(batch) >= self._size:
                return Step.item(batch)
            step = self._inner.advance()

        self._inner_done = True
        # Yield remaining elements
        if batch:
            return Step.item(batch)
        return FINISHED

    def _release(self) -> None:
        self._inner.close()


class BatchSequence(Sequence):
    """Groups consecutive elements into lists of ``size``; the last may be shorter."""

    def __init__(self, source: Sequence, size: int):
        self.source = ensure_sequence(source, "source")
        self.size = _ensure_count(size, "size", minimum=1)

    @property
    def is_finite(self) -> bool:
        return self.source.is_finite

    def cursor(self) -> BatchCursor:
        return BatchCursor(self.source.cursor(), self.size)


# ============================================================================
# chain
# ============================================================================


class ChainCursor(Cursor):
    """Walks the sequences in order, creating each inner cursor only when reached."""

    def __init__(self, sequences: Tuple[Sequence, ...]):
        super().__init__()
        self._sequences = sequences
        self._index = 0
        self._current: Optional[Cursor] = None

    def _advance(self, resume: Any) -> Step:
        while self._index < len(self._sequences):
            if self._current is None:
                self._current = self._sequences[self._index].cursor()
            step = self._current.advance(resume)
            if not step.done:
                return step
            self._current = None
            self._index += 1
            resume = None
        return FINISHED

    def _release(self) -> None:
        if self._current is not None:
            self._current.close()
            self._current = None


class ChainSequence(Sequence):
    """Concatenation of several sequences."""

    def __init__(self, sequences: Tuple[Sequence, ...]):
        self.sequences = tuple(
            ensure_sequence(seq, f"sequences[{i}]") for i, seq in enumerate(sequences)
        )

    @property
    def is_finite(self) -> bool:
        return all(seq.is_finite for seq in self.sequences)

    def cursor(self) -> ChainCursor:
        return ChainCursor(self.sequences)


# ============================================================================
# Constructors
# ============================================================================


def map_seq(source: Sequence, fn: Callable) -> MapSequence:
    """Lazily apply ``fn`` to every element."""
    return MapSequence(source, fn)


def filter_seq(source: Sequence, predicate: Callable) -> FilterSequence:
    """Lazily keep elements matching ``predicate``."""
    return FilterSequence(source, predicate)


def take(source: Sequence, count: int) -> TakeSequence:
    """Lazily keep the first ``count`` elements."""
    return TakeSequence(source, count)


def zip_seq(left: Sequence, right: Sequence) -> ZipSequence:
    """Lazily pair elements of two sequences."""
    return ZipSequence(left, right)


def batch(source: Sequence, size: int) -> BatchSequence:
    """Lazily group elements into lists."""
    return BatchSequence(source, size)


def chain(*sequences: Sequence) -> ChainSequence:
    """Lazily concatenate sequences."""
    return ChainSequence(sequences)

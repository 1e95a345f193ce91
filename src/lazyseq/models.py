"""Data models shared by cursors, sequences and sinks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class _Empty:
    """Marker for 'no value'. Distinct from None, which is a valid element."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "EMPTY"

    def __reduce__(self):
        return (_Empty, ())


EMPTY = _Empty()


@dataclass(frozen=True)
class Step:
    """One unit of output from a cursor.

    ``value`` holds the produced element while ``done`` is False. Once
    ``done`` is True, ``value`` is EMPTY except for the single step that
    carries a coroutine's return value.
    """

    value: Any = EMPTY
    done: bool = False

    @classmethod
    def item(cls, value: Any) -> "Step":
        """Create a step carrying a produced element."""
        return cls(value=value, done=False)

    @classmethod
    def finished(cls, value: Any = EMPTY) -> "Step":
        """Create a terminal step."""
        return cls(value=value, done=True)

    def __repr__(self):
        return f"Step(value={self.value!r}, done={self.done})"


FINISHED = Step.finished()


class CoroutineState(str, Enum):
    """Lifecycle of a coroutine-backed cursor."""

    NOT_STARTED = "not_started"
    SUSPENDED = "suspended"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self in (CoroutineState.COMPLETED, CoroutineState.FAILED, CoroutineState.CLOSED)


@dataclass
class WriteStatistics:
    """Statistics for write operations."""

    total_rows: int = 0
    total_batches: int = 0
    file_size_bytes: int = 0
    elapsed_time: float = 0.0

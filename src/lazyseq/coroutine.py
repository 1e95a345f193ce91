"""Sequences backed by suspendable computations.

A coroutine sequence wraps a generator function (the *body*). Every cursor
runs its own instance of the body, so local bindings live in that
cursor's generator frame and survive across suspensions:

    NOT_STARTED -> SUSPENDED -> ... -> COMPLETED | FAILED | CLOSED

``yield v`` suspends the body and produces ``Step(v, done=False)``. The
value passed to the next ``advance(resume)`` becomes the result of that
``yield`` expression. ``return v`` (or falling off the end) produces
``Step(v, done=True)``, after every pending ``finally`` block in the body
has run. A ``None`` return value is reported as EMPTY.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Dict, Generator, Optional, Tuple

from .errors import ComputationFailure, InvalidArgument
from .models import EMPTY, FINISHED, CoroutineState, Step
from .sequence_interface import Cursor, Sequence

logger = logging.getLogger(__name__)


class CoroutineCursor(Cursor):
    """Cursor driving one instance of a coroutine body."""

    def __init__(self, body: Callable[..., Generator], args: Tuple = (), kwargs: Optional[Dict] = None):
        super().__init__()
        self._body = body
        self._args = args
        self._kwargs = kwargs or {}
        self._generator: Optional[Generator] = None
        self._pending_throw: Optional[BaseException] = None
        self._state = CoroutineState.NOT_STARTED

    @property
    def state(self) -> CoroutineState:
        """Current lifecycle state."""
        return self._state

    def advance(self, resume: Any = None) -> Step:
        if self._state is CoroutineState.RUNNING:
            raise ComputationFailure("Cursor advanced while its body is already executing")
        return super().advance(resume)

    def _advance(self, resume: Any) -> Step:
        if self._state is CoroutineState.NOT_STARTED:
            if resume is not None:
                logger.debug(f"Ignoring resume value {resume!r} on first advance")
            try:
                self._generator = self._start()
            except Exception:
                self._state = CoroutineState.FAILED
                raise
            return self._run(lambda: next(self._generator))
        if self._pending_throw is not None:
            exc, self._pending_throw = self._pending_throw, None
            return self._run(lambda: self._generator.throw(exc))
        return self._run(lambda: self._generator.send(resume))

    def throw(self, exc: BaseException) -> Step:
        """Raise ``exc`` inside the body at its current suspension point.

        Returns:
            The Step produced if the body handles the exception

        Raises:
            ComputationFailure: If the exception propagates out of the body,
                or if the body has not started yet
        """
        if self._exhausted:
            return FINISHED
        if self._state is CoroutineState.RUNNING:
            raise ComputationFailure("Cursor thrown into while its body is already executing")
        if self._state is CoroutineState.NOT_STARTED:
            self._state = CoroutineState.FAILED
            self._exhausted = True
            logger.warning(f"Exception thrown into a coroutine that never started: {exc!r}")
            raise ComputationFailure(f"Coroutine failed before starting: {exc}", cause=exc) from exc

        self._pending_throw = exc
        return self.advance()

    def _start(self) -> Generator:
        generator = self._body(*self._args, **self._kwargs)
        if not inspect.isgenerator(generator):
            raise TypeError(
                f"Coroutine body {getattr(self._body, '__name__', self._body)!r} "
                f"returned {type(generator).__name__}, expected a generator"
            )
        return generator

    def _run(self, resume_body: Callable[[], Any]) -> Step:
        self._state = CoroutineState.RUNNING
        try:
            value = resume_body()
        except StopIteration as stop:
            self._state = CoroutineState.COMPLETED
            return Step.finished(EMPTY if stop.value is None else stop.value)
        except BaseException:
            self._state = CoroutineState.FAILED
            raise
        self._state = CoroutineState.SUSPENDED
        return Step.item(value)

    def _release(self) -> None:
        if self._state is CoroutineState.SUSPENDED:
            self._state = CoroutineState.CLOSED
            try:
                self._generator.close()
            except Exception as e:
                self._state = CoroutineState.FAILED
                logger.warning(f"Coroutine cleanup failed: {e!r}")
                raise ComputationFailure(f"Coroutine cleanup failed: {e}", cause=e) from e
        elif self._state is CoroutineState.NOT_STARTED:
            self._state = CoroutineState.CLOSED
        self._generator = None

    def __repr__(self):
        name = getattr(self._body, "__name__", repr(self._body))
        return f"CoroutineCursor({name}, state={self._state.value})"


class CoroutineSequence(Sequence):
    """Sequence whose cursors run a generator function.

    Creating the sequence does not call the body; each cursor calls it on
    its first advance.
    """

    def __init__(
        self,
        body: Callable[..., Generator],
        args: Tuple = (),
        kwargs: Optional[Dict] = None,
        finite: bool = False,
    ):
        """
        Initialize coroutine sequence.

        Args:
            body: Generator function run by every cursor
            args: Positional arguments passed to the body
            kwargs: Keyword arguments passed to the body
            finite: Declare the body as always terminating
        """
        if not callable(body):
            raise InvalidArgument(f"Coroutine body must be callable, got {type(body).__name__}")
        self._body = body
        self._args = tuple(args)
        self._kwargs = dict(kwargs or {})
        self._finite = finite

    @property
    def is_finite(self) -> bool:
        return self._finite

    def cursor(self) -> CoroutineCursor:
        return CoroutineCursor(self._body, self._args, self._kwargs)

    def __repr__(self):
        name = getattr(self._body, "__name__", repr(self._body))
        return f"CoroutineSequence({name})"


def coroutine_sequence(func: Optional[Callable[..., Generator]] = None, *, finite: bool = False):
    """Decorator turning a generator function into a CoroutineSequence factory.

    Example:
        @coroutine_sequence(finite=True)
        def countdown(n):
            while n > 0:
                yield n
                n -= 1

        collect(countdown(3))  # [3, 2, 1]
    """

    def decorate(body):
        @functools.wraps(body)
        def factory(*args, **kwargs) -> CoroutineSequence:
            return CoroutineSequence(body, args, kwargs, finite=finite)

        return factory

    if func is None:
        return decorate
    return decorate(func)

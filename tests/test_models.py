"""Tests for models module."""

import dataclasses
import pickle

import pytest

from lazyseq.models import EMPTY, FINISHED, CoroutineState, Step, WriteStatistics


def test_empty_is_singleton():
    """Test that EMPTY has a single instance and is distinct from None."""
    assert type(EMPTY)() is EMPTY
    assert pickle.loads(pickle.dumps(EMPTY)) is EMPTY
    assert EMPTY is not None
    assert not EMPTY
    assert repr(EMPTY) == "EMPTY"


def test_step_constructors():
    """Test item and finished helpers."""
    assert Step.item(5) == Step(5, False)
    assert Step.finished() == Step(EMPTY, True)
    assert Step.finished("result") == Step("result", True)
    assert FINISHED == Step(EMPTY, True)


def test_step_is_immutable():
    """Test that steps cannot be modified."""
    step = Step.item(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.value = 2


def test_step_distinguishes_none_from_empty():
    """Test that a None element is not an end marker."""
    assert Step.item(None) != Step.item(EMPTY)
    assert not Step.item(None).done


def test_coroutine_state_terminal():
    """Test terminal state classification."""
    assert CoroutineState.COMPLETED.is_terminal
    assert CoroutineState.FAILED.is_terminal
    assert CoroutineState.CLOSED.is_terminal
    assert not CoroutineState.NOT_STARTED.is_terminal
    assert not CoroutineState.SUSPENDED.is_terminal
    assert CoroutineState.SUSPENDED == "suspended"


def test_write_statistics_defaults():
    """Test WriteStatistics default values."""
    stats = WriteStatistics()
    assert stats.total_rows == 0
    assert stats.total_batches == 0
    assert stats.file_size_bytes == 0
    assert stats.elapsed_time == 0.0

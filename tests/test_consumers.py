"""Tests for consumers module."""

import pytest

from lazyseq.consumers import collect, for_each, resolve_limit
from lazyseq.coroutine import CoroutineSequence
from lazyseq.errors import ComputationFailure, InvalidArgument, NonTermination
from lazyseq.sources import count_from, from_iterable


def three_items():
    yield 1
    yield 2
    yield 3


def test_collect_finite():
    """Test collecting a finite sequence."""
    assert collect(from_iterable([3, 1, 2])) == [3, 1, 2]


def test_collect_infinite_hits_limit():
    """Test that an infinite sequence raises NonTermination."""
    with pytest.raises(NonTermination) as info:
        collect(count_from(), limit=10)

    assert info.value.limit == 10


def test_collect_uses_configured_limit(monkeypatch):
    """Test that the default bound comes from the environment."""
    monkeypatch.setenv("LAZYSEQ_COLLECT_LIMIT", "5")

    with pytest.raises(NonTermination) as info:
        collect(count_from())

    assert info.value.limit == 5


def test_collect_exactly_at_limit():
    """Test that a sequence ending exactly at the bound is accepted."""
    assert collect(CoroutineSequence(three_items), limit=3) == [1, 2, 3]

    with pytest.raises(NonTermination):
        collect(CoroutineSequence(three_items), limit=2)


def test_finite_sequences_are_not_bounded():
    """Test that statically finite sequences ignore the bound."""
    assert collect(from_iterable(range(50)), limit=10) == list(range(50))
    assert len(collect(count_from().take(50), limit=10)) == 50


def test_non_termination_closes_cursor():
    """Test that exceeding the bound runs the body's cleanup."""
    log = []

    def endless():
        try:
            while True:
                yield 0
        finally:
            log.append("released")

    with pytest.raises(NonTermination):
        collect(CoroutineSequence(endless), limit=3)

    assert log == ["released"]


def test_collect_propagates_failure():
    """Test that failures surface to the caller."""

    def faulty():
        yield 1
        raise ValueError("bad record")

    with pytest.raises(ComputationFailure, match="bad record"):
        collect(CoroutineSequence(faulty))


def test_for_each():
    """Test the explicit driver loop."""
    seen = []
    count = for_each(from_iterable("abc"), seen.append)

    assert count == 3
    assert seen == ["a", "b", "c"]


@pytest.mark.parametrize("limit", [0, -3, 2.5, True])
def test_invalid_limit(limit):
    """Test limit validation."""
    with pytest.raises(InvalidArgument, match="limit"):
        collect(count_from(), limit=limit)


def test_collect_rejects_non_sequence():
    """Test argument validation."""
    with pytest.raises(InvalidArgument, match="Sequence"):
        collect([1, 2, 3])


def test_resolve_limit():
    """Test bound resolution."""
    assert resolve_limit(from_iterable([1]), 10) is None
    assert resolve_limit(count_from(), 10) == 10

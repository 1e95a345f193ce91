"""Eager consumers that drive a cursor to completion."""

import logging
from typing import Any, Callable, List, Optional

from .combinators import ensure_sequence
from .config import get_engine_config
from .errors import InvalidArgument, NonTermination
from .sequence_interface import Sequence

logger = logging.getLogger(__name__)


def resolve_limit(sequence: Sequence, limit: Optional[int] = None) -> Optional[int]:
    """Work out the safety bound for eagerly consuming ``sequence``.

    Args:
        sequence: Sequence about to be consumed
        limit: Explicit bound, or None to use the configured default

    Returns:
        None when the sequence is statically known to be finite, otherwise
        the maximum number of elements the consumer may pull
    """
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
        raise InvalidArgument(f"limit must be a positive integer or None, got {limit!r}")
    if sequence.is_finite:
        return None
    if limit is None:
        limit = get_engine_config().collect_limit
    return limit


def for_each(sequence: Sequence, fn: Callable[[Any], Any], limit: Optional[int] = None) -> int:
    """
    Call ``fn`` on every element of a fresh cursor over ``sequence``.

    Args:
        sequence: Sequence to consume
        fn: Function called once per element, in order
        limit: Safety bound for sequences not known to be finite

    Returns:
        Number of elements consumed

    Raises:
        NonTermination: If more than ``limit`` elements were produced
        ComputationFailure: If the sequence failed while advancing
    """
    ensure_sequence(sequence)
    bound = resolve_limit(sequence, limit)
    count = 0

    with sequence.cursor() as cursor:
        step = cursor.advance()
        while not step.done:
            if bound is not None and count >= bound:
                logger.warning(f"Stopped consuming {sequence!r} after {count:,} elements")
                raise NonTermination(bound)
            fn(step.value)
            count += 1
            step = cursor.advance()

    logger.debug(f"Consumed {count:,} elements from {sequence!r}")
    return count


def collect(sequence: Sequence, limit: Optional[int] = None) -> List:
    """
    Collect every element of ``sequence`` into a list.

    Sequences that are not statically known to be finite are guarded by
    ``limit`` (default: ``EngineConfig.collect_limit``).

    Raises:
        NonTermination: If the bound is exceeded before the sequence ends
        ComputationFailure: If the sequence failed while advancing
    """
    items: List = []
    for_each(sequence, items.append, limit)
    return items

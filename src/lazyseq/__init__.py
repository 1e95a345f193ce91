"""lazyseq - Pull-based lazy sequences with suspendable coroutine cursors."""

__version__ = "0.1.0"

from .combinators import batch, chain, filter_seq, map_seq, take, zip_seq
from .config import EngineConfig, get_engine_config
from .consumers import collect, for_each
from .coroutine import CoroutineCursor, CoroutineSequence, coroutine_sequence
from .errors import ComputationFailure, InvalidArgument, LazySeqError, NonTermination
from .models import EMPTY, CoroutineState, Step
from .sequence_interface import Cursor, Sequence
from .sources import count_from, from_iterable, repeat

__all__ = [
    # Models
    "Step",
    "EMPTY",
    "CoroutineState",
    # Protocol objects
    "Cursor",
    "Sequence",
    # Coroutines
    "CoroutineSequence",
    "CoroutineCursor",
    "coroutine_sequence",
    # Sources
    "from_iterable",
    "count_from",
    "repeat",
    # Combinators
    "map_seq",
    "filter_seq",
    "take",
    "zip_seq",
    "batch",
    "chain",
    # Consumers
    "collect",
    "for_each",
    # Errors
    "LazySeqError",
    "ComputationFailure",
    "NonTermination",
    "InvalidArgument",
    # Config
    "EngineConfig",
    "get_engine_config",
]

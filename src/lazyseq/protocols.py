"""Protocol definitions for dependency inversion."""

from typing import Protocol


class LoggerProtocol(Protocol):
    """Logger accepted by the Parquet writer: progress at info, per-batch detail at debug."""

    def info(self, message: str) -> None:
        ...

    def debug(self, message: str) -> None:
        ...

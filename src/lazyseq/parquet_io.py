"""Parquet sink and source for record sequences."""

import logging
import time
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from .combinators import batch, ensure_sequence, take
from .config import get_engine_config
from .consumers import for_each, resolve_limit
from .errors import InvalidArgument, NonTermination
from .models import FINISHED, Step, WriteStatistics
from .protocols import LoggerProtocol
from .sequence_interface import Cursor, Sequence


class ParquetSequenceWriter:
    """
    Writes a sequence of dict records to a Parquet file.

    Records are pulled lazily and written one row group per batch, so only
    a single batch is held in memory at a time. Uses context manager
    pattern for resource management.
    """

    def __init__(
        self,
        output_path: Path,
        compression: str = "snappy",
        batch_size: int = 1000,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize Parquet writer.

        Args:
            output_path: Path to output Parquet file
            compression: Compression codec (snappy, gzip, zstd, ...)
            batch_size: Number of records per row group
            logger: Logger instance
        """
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise InvalidArgument(f"batch_size must be a positive integer, got {batch_size!r}")
        self.output_path = Path(output_path)
        self.compression = compression
        self.batch_size = batch_size
        self._logger = logger or logging.getLogger(__name__)
        self._writer: Optional[pq.ParquetWriter] = None
        self._schema: Optional[pa.Schema] = None
        self._total_rows = 0
        self._total_batches = 0
        self._record_bound: Optional[int] = None

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and close writer."""
        self.close()

    def write(self, records: Sequence, limit: Optional[int] = None) -> WriteStatistics:
        """
        Write every record of ``records`` to the Parquet file.

        Args:
            records: Sequence of dicts sharing the same keys
            limit: Safety bound on the number of records for sequences not
                known to be finite (defaults to the configured collect limit)

        Returns:
            WriteStatistics with operation details

        Raises:
            NonTermination: If the record bound is exceeded
            ValueError: If a batch does not match the schema of the first one
            RuntimeError: If the sequence produced no records
        """
        ensure_sequence(records, "records")
        start_time = time.time()

        self._record_bound = resolve_limit(records, limit)
        source = records
        if self._record_bound is not None:
            # One record past the bound is enough to detect the overrun.
            source = take(records, self._record_bound + 1)

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._logger.info(f"Writing records to Parquet: {self.output_path}")

        for_each(batch(source, self.batch_size), self._write_batch)

        if self._writer is None:
            raise RuntimeError("No records written. The sequence was empty.")

        self.close()
        elapsed_time = time.time() - start_time
        file_size = self.output_path.stat().st_size if self.output_path.exists() else 0

        self._logger.info(
            f"Successfully wrote {self._total_rows:,} total rows to {self.output_path}"
        )

        return WriteStatistics(
            total_rows=self._total_rows,
            total_batches=self._total_batches,
            file_size_bytes=file_size,
            elapsed_time=elapsed_time,
        )

    def _write_batch(self, rows: List[Dict[str, Any]]) -> None:
        bound = self._record_bound
        if bound is not None and self._total_rows + len(rows) > bound:
            self._logger.info(f"Record bound of {bound:,} exceeded after {self._total_rows:,} rows")
            raise NonTermination(bound)

        df = pd.DataFrame(rows)
        table = pa.Table.from_pandas(df, preserve_index=False)

        # Initialize writer on first batch
        if self._writer is None:
            self._schema = table.schema
            self._writer = pq.ParquetWriter(
                str(self.output_path),
                self._schema,
                compression=self.compression,
            )
            self._logger.debug(f"Initialized ParquetWriter with schema: {self._schema}")

        if not table.schema.equals(self._schema):
            raise ValueError(
                f"Record batch schema mismatch. Expected {self._schema}, got {table.schema}"
            )

        self._writer.write_table(table)
        self._total_rows += len(df)
        self._total_batches += 1
        self._logger.debug(f"Written {len(df)} rows (total: {self._total_rows})")

    def close(self):
        """Close the Parquet writer."""
        if self._writer:
            self._writer.close()
            self._writer = None


class ParquetRecordCursor(Cursor):
    """Reads a Parquet file batch by batch, yielding one dict per row."""

    def __init__(self, path: Path, batch_size: int):
        super().__init__()
        self._path = path
        self._batch_size = batch_size
        self._file: Optional[pq.ParquetFile] = None
        self._batches = None
        self._rows: Deque[Dict[str, Any]] = deque()

    def _advance(self, resume: Any) -> Step:
        if self._file is None:
            self._file = pq.ParquetFile(str(self._path))
            self._batches = self._file.iter_batches(batch_size=self._batch_size)

        while not self._rows:
            record_batch = next(self._batches, None)
            if record_batch is None:
                return FINISHED
            self._rows.extend(record_batch.to_pylist())

        return Step.item(self._rows.popleft())

    def _release(self) -> None:
        self._rows.clear()
        self._batches = None
        if self._file is not None:
            self._file.close()
            self._file = None


class ParquetRecordSequence(Sequence):
    """Sequence of dict records stored in a Parquet file.

    The file is opened by each cursor on its first advance and closed when
    the cursor ends or is closed.
    """

    def __init__(self, path: Path, batch_size: Optional[int] = None):
        self.path = Path(path)
        if batch_size is None:
            batch_size = get_engine_config().batch_size
        elif isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise InvalidArgument(f"batch_size must be a positive integer, got {batch_size!r}")
        self.batch_size = batch_size

    @property
    def is_finite(self) -> bool:
        return True

    def cursor(self) -> ParquetRecordCursor:
        return ParquetRecordCursor(self.path, self.batch_size)

    def __repr__(self):
        return f"ParquetRecordSequence({str(self.path)!r})"


def parquet_records(path: Path, batch_size: Optional[int] = None) -> ParquetRecordSequence:
    """Create a lazy record sequence over a Parquet file."""
    return ParquetRecordSequence(path, batch_size)

"""Tests for parquet_io module."""

import tempfile
from pathlib import Path

import pandas as pd
import pyarrow.parquet as pq
import pytest

from lazyseq.consumers import collect
from lazyseq.coroutine import CoroutineSequence
from lazyseq.data_generator import DataGenerator
from lazyseq.errors import InvalidArgument, NonTermination
from lazyseq.models import EMPTY, Step
from lazyseq.parquet_io import ParquetSequenceWriter, parquet_records
from lazyseq.sources import from_iterable

RECORDS = [
    {"id": 1, "name": "Alice", "age": 25},
    {"id": 2, "name": "Bob", "age": 30},
    {"id": 3, "name": "Charlie", "age": 35},
    {"id": 4, "name": "David", "age": 40},
    {"id": 5, "name": "Eve", "age": 45},
]


def test_write_records():
    """Test writing a finite record sequence in batches."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "nested" / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=2) as writer:
            stats = writer.write(from_iterable(RECORDS))

        assert stats.total_rows == 5
        assert stats.total_batches == 3
        assert stats.file_size_bytes > 0
        assert output_path.exists()

        assert pq.ParquetFile(output_path).metadata.num_row_groups == 3
        df = pd.read_parquet(output_path)
        assert df["name"].tolist() == ["Alice", "Bob", "Charlie", "David", "Eve"]


def test_round_trip_through_sequences():
    """Test reading written records back as a lazy sequence."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=2) as writer:
            writer.write(from_iterable(RECORDS).filter(lambda r: r["age"] >= 30))

        records = parquet_records(output_path, batch_size=3)

        assert records.is_finite
        assert [r["id"] for r in collect(records)] == [2, 3, 4, 5]
        assert collect(records.map(lambda r: r["name"]).take(2)) == ["Bob", "Charlie"]


def test_infinite_sequence_is_bounded():
    """Test that writing an infinite sequence stops at the bound."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=10) as writer:
            with pytest.raises(NonTermination) as info:
                writer.write(DataGenerator(seed=1).records(), limit=25)

        assert info.value.limit == 25


def test_empty_sequence():
    """Test that writing no records raises an error."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path) as writer:
            with pytest.raises(RuntimeError, match="No records written"):
                writer.write(from_iterable([]))


def test_schema_validation():
    """Test that schema mismatch raises error."""
    records = [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
        {"id": 3, "age": 25},
    ]

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=2) as writer:
            with pytest.raises(ValueError, match="schema mismatch"):
                writer.write(from_iterable(records))


def test_invalid_batch_size():
    """Test writer argument validation."""
    with pytest.raises(InvalidArgument):
        ParquetSequenceWriter("out.parquet", batch_size=0)


def test_record_cursor_close():
    """Test closing a record cursor part-way through the file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path) as writer:
            writer.write(from_iterable(RECORDS))

        cursor = parquet_records(output_path, batch_size=2).cursor()
        assert cursor.advance().value["name"] == "Alice"

        cursor.close()
        assert cursor.advance() == Step(EMPTY, True)


def numbered_records(n):
    for i in range(n):
        yield {"id": i, "name": f"user-{i}"}


def test_record_bound_counts_records_not_batches():
    """Test that the bound is enforced on records when it is not a multiple of batch_size."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=3) as writer:
            with pytest.raises(NonTermination) as info:
                writer.write(CoroutineSequence(numbered_records, args=(11,)), limit=10)

        assert info.value.limit == 10
        assert pd.read_parquet(output_path)["id"].tolist() == list(range(9))


def test_record_bound_allows_exact_count():
    """Test that a sequence with exactly limit records is written in full."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=3) as writer:
            stats = writer.write(CoroutineSequence(numbered_records, args=(10,)), limit=10)

        assert stats.total_rows == 10
        assert stats.total_batches == 4
        assert len(pd.read_parquet(output_path)) == 10


@pytest.mark.parametrize("batch_size", [0, -1, True])
def test_parquet_records_invalid_batch_size(batch_size):
    """Test that parquet_records rejects non-positive batch sizes."""
    with pytest.raises(InvalidArgument, match="batch_size"):
        parquet_records("in.parquet", batch_size=batch_size)


def test_writer_accepts_custom_logger():
    """Test that the writer reports progress through an injected logger."""

    class RecordingLogger:
        def __init__(self):
            self.infos = []
            self.debugs = []

        def info(self, message):
            self.infos.append(message)

        def debug(self, message):
            self.debugs.append(message)

    logger = RecordingLogger()
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = Path(tmpdir) / "test.parquet"

        with ParquetSequenceWriter(output_path, batch_size=2, logger=logger) as writer:
            writer.write(from_iterable(RECORDS))

    assert any("Writing records" in m for m in logger.infos)
    assert any("Successfully wrote 5 total rows" in m for m in logger.infos)
    assert len([m for m in logger.debugs if m.startswith("Written")]) == 3

"""Demo entry point: stream fake records through a lazy pipeline into Parquet."""

import logging
import sys
import time

from .config import get_engine_config
from .data_generator import DataGenerator
from .models import WriteStatistics
from .parquet_io import ParquetSequenceWriter, parquet_records

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging level.

    Args:
        verbose: Enable verbose logging
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def with_domain(record: dict) -> dict:
    """Add the e-mail domain to a record."""
    return {**record, "email_domain": record["email"].rsplit("@", 1)[-1]}


def print_summary(stats: WriteStatistics, rows_read: int):
    """Print summary statistics."""
    print("\n" + "=" * 80)
    print("EXECUTION SUMMARY")
    print("=" * 80)

    print("\nParquet File Writing:")
    print(f"  Rows written: {stats.total_rows:,}")
    print(f"  Row groups: {stats.total_batches}")
    print(f"  File size: {stats.file_size_bytes / (1024 * 1024):.2f} MB")
    print(f"  Time taken: {stats.elapsed_time:.2f} seconds")

    print("\nVerification:")
    print(f"  Rows read back: {rows_read:,}")

    print("\n" + "=" * 80)


def main() -> int:
    """Main execution function."""
    setup_logging(verbose="-v" in sys.argv[1:])
    logger.info("Starting lazy sequence demo pipeline")
    logger.info("=" * 80)

    try:
        config = get_engine_config()

        logger.info(f"Number of records: {config.num_records:,}")
        logger.info(f"Batch size: {config.batch_size:,}")
        logger.info(f"Output file: {config.output_file}")

        # Nothing runs until the writer pulls from the pipeline
        pipeline = (
            DataGenerator().records()
            .filter(lambda record: record["age"] >= 30)
            .map(with_domain)
            .take(config.num_records)
        )

        start_time = time.time()
        with ParquetSequenceWriter(
            config.output_file, config.compression, config.batch_size
        ) as writer:
            stats = writer.write(pipeline)

        rows_read = sum(1 for _ in parquet_records(config.output_file, config.batch_size))
        logger.info(f"Pipeline completed in {time.time() - start_time:.2f} seconds")

        print_summary(stats, rows_read)
        return 0

    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\nError during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

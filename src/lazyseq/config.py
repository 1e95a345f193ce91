"""Configuration management for the engine."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class EngineConfig:
    """Engine configuration parameters."""

    collect_limit: int = 100_000
    batch_size: int = 1000
    compression: str = "snappy"
    num_records: int = 10_000
    output_file: Path = Path("output/records.parquet")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load engine configuration from environment variables."""
        return cls(
            collect_limit=int(os.getenv("LAZYSEQ_COLLECT_LIMIT", "100000")),
            batch_size=int(os.getenv("LAZYSEQ_BATCH_SIZE", "1000")),
            compression=os.getenv("LAZYSEQ_COMPRESSION", "snappy"),
            num_records=int(os.getenv("LAZYSEQ_NUM_RECORDS", "10000")),
            output_file=Path(os.getenv("LAZYSEQ_OUTPUT_FILE", "output/records.parquet")),
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.collect_limit <= 0:
            raise ValueError("collect_limit must be positive")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.num_records < 0:
            raise ValueError("num_records must not be negative")
        self.output_file = Path(self.output_file)


def get_engine_config() -> EngineConfig:
    """Get engine configuration."""
    return EngineConfig.from_env()

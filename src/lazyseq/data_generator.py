"""Generate fake person records as an infinite coroutine sequence."""

import logging
from typing import Any, Dict, Generator

from faker import Faker

from .coroutine import CoroutineSequence

logger = logging.getLogger(__name__)


class DataGenerator:
    """Generate fake data for pipelines and tests."""

    def __init__(self, seed: int = 42):
        """Initialize the data generator.

        Args:
            seed: Random seed; every cursor restarts from it, so two cursors
                over ``records()`` produce identical records
        """
        self.seed = seed

    def records(self) -> CoroutineSequence:
        """Return an infinite sequence of fake person records."""
        return CoroutineSequence(self._generate, (self.seed,))

    @staticmethod
    def _generate(seed: int) -> Generator[Dict[str, Any], None, None]:
        faker = Faker()
        faker.seed_instance(seed)
        record_id = 0
        logger.debug(f"Starting fake record stream with seed {seed}")

        while True:
            yield {
                "id": record_id,
                "name": faker.name(),
                "email": faker.email(),
                "city": faker.city(),
                "country": faker.country(),
                "job": faker.job(),
                "company": faker.company(),
                "age": faker.random_int(min=18, max=90),
            }
            record_id += 1

            if record_id % 10000 == 0:
                logger.debug(f"Generated {record_id:,} records...")


def fake_records(seed: int = 42) -> CoroutineSequence:
    """Infinite sequence of fake person records."""
    return DataGenerator(seed).records()

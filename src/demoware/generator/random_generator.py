"""
Randomized metrics generator.

This module provides the MetricsGenerator implementation backing the metrics
endpoint. Every call draws a fresh metric count and fresh payload values from
an injected random source, so tests can substitute a seeded one.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Callable, List

from demoware.config.constants import CPU_USAGE_CORES
from demoware.contracts import MetricsGenerator
from demoware.domain import MetricEnvelope, MetricKind

# Module logger
logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


class RandomMetricsGenerator(MetricsGenerator):
    """
    Produces between min_count and max_count randomly typed metric envelopes.

    The count is drawn uniformly from [min_count, max_count). When both bounds
    are equal the range would be empty, so exactly min_count envelopes are
    returned instead.

    Each envelope picks one of the MetricKind values with equal probability.
    """

    _KINDS = tuple(MetricKind)

    def __init__(
        self,
        rng: random.Random,
        min_count: int,
        max_count: int,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initializes the generator.

        Args:
            rng: The random source. Shared with other components of the process.
            min_count: Lower bound (inclusive) of the metric count.
            max_count: Upper bound (exclusive, unless equal to min_count).
            clock: Returns the timestamp used for last_kernel_upgrade metrics.

        Raises:
            ValueError: If a bound is negative or min_count > max_count.
        """
        if min_count < 0 or max_count < 0:
            raise ValueError("metric counts must not be negative")
        if min_count > max_count:
            raise ValueError("invalid metrics count params: min-count > max-count")

        self._rng: random.Random = rng
        self._min_count: int = min_count
        self._max_count: int = max_count
        self._clock: Clock = clock

    def _draw_count(self) -> int:
        if self._min_count == self._max_count:
            return self._min_count
        return self._rng.randrange(self._min_count, self._max_count)

    def _make_envelope(self, kind: MetricKind) -> MetricEnvelope:
        if kind is MetricKind.LOAD_AVG:
            return MetricEnvelope.load_avg(self._rng.random())
        if kind is MetricKind.CPU_USAGE:
            return MetricEnvelope.cpu_usage([self._rng.random() for _ in range(CPU_USAGE_CORES)])
        if kind is MetricKind.LAST_KERNEL_UPGRADE:
            return MetricEnvelope.last_kernel_upgrade(self._clock())
        raise ValueError(f"Unsupported metric kind: {kind}")

    def generate(self) -> List[MetricEnvelope]:
        """
        Produces a fresh list of envelopes.

        Returns:
            List[MetricEnvelope]: The envelopes, in generation order.
        """
        count = self._draw_count()
        envelopes = [self._make_envelope(self._rng.choice(self._KINDS)) for _ in range(count)]
        logger.debug(f"Generated {count} metrics")
        return envelopes

"""
Unit tests for the RandomMetricsGenerator class.

This module contains tests ensuring that the generator honours its count
bounds, draws every metric kind, and fills payloads with values of the
right shape and range.

The tests follow the Arrange-Act-Assert (AAA) pattern and use seeded random
sources so every run is reproducible.
"""

import random
from collections import Counter
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from demoware.domain import CpuUsagePayload, KernelUpgradePayload, LoadAvgPayload, MetricKind
from demoware.generator.random_generator import RandomMetricsGenerator, utc_now

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock() -> MagicMock:
    """
    Creates a clock that always returns FIXED_TIME.

    Returns:
        MagicMock: A callable returning a fixed timezone-aware datetime.
    """
    return MagicMock(return_value=FIXED_TIME)


@pytest.mark.parametrize("min_count, max_count", [(0, 10), (2, 3), (5, 9), (0, 1)])
def test_generate_should_draw_count_from_half_open_range(min_count: int, max_count: int) -> None:
    """
    Tests that the number of metrics lies in [min_count, max_count) when the bounds differ.
    """
    # Arrange
    generator = RandomMetricsGenerator(random.Random(1234), min_count, max_count)

    # Act
    counts = {len(generator.generate()) for _ in range(300)}

    # Assert
    assert counts == set(range(min_count, max_count))


@pytest.mark.parametrize("count", [0, 1, 2, 7])
def test_generate_should_return_exactly_min_count_when_bounds_are_equal(count: int) -> None:
    """
    Tests that equal bounds yield exactly that many metrics instead of an empty draw range.
    """
    # Arrange
    generator = RandomMetricsGenerator(random.Random(7), count, count)

    # Act / Assert
    for _ in range(20):
        assert len(generator.generate()) == count


def test_generate_should_not_consume_randomness_for_count_when_bounds_are_equal() -> None:
    """
    Tests that the degenerate range does not call randrange, which would raise on an empty range.
    """
    # Arrange
    rng = MagicMock(spec=random.Random)
    rng.choice.return_value = MetricKind.LOAD_AVG
    rng.random.return_value = 0.5
    generator = RandomMetricsGenerator(rng, 3, 3)

    # Act
    envelopes = generator.generate()

    # Assert
    rng.randrange.assert_not_called()
    assert len(envelopes) == 3


def test_generate_should_produce_every_kind(fixed_clock: MagicMock) -> None:
    """
    Tests that all three kinds are drawn, each roughly a third of the time.
    """
    # Arrange
    generator = RandomMetricsGenerator(random.Random(42), 30, 30, clock=fixed_clock)

    # Act
    kinds = Counter(envelope.kind for _ in range(100) for envelope in generator.generate())

    # Assert
    assert set(kinds) == set(MetricKind)
    for kind in MetricKind:
        assert 800 < kinds[kind] < 1200


def test_generate_should_match_payload_shape_to_kind(fixed_clock: MagicMock) -> None:
    """
    Tests that every payload has the shape and value range of its kind.
    """
    # Arrange
    generator = RandomMetricsGenerator(random.Random(99), 50, 50, clock=fixed_clock)

    # Act
    envelopes = generator.generate()

    # Assert
    for envelope in envelopes:
        if envelope.kind is MetricKind.LOAD_AVG:
            assert isinstance(envelope.payload, LoadAvgPayload)
            assert 0.0 <= envelope.payload.value < 1.0
        elif envelope.kind is MetricKind.CPU_USAGE:
            assert isinstance(envelope.payload, CpuUsagePayload)
            assert len(envelope.payload.value) == 5
            assert all(0.0 <= value < 1.0 for value in envelope.payload.value)
        else:
            assert envelope.kind is MetricKind.LAST_KERNEL_UPGRADE
            assert isinstance(envelope.payload, KernelUpgradePayload)
            assert envelope.payload.value == FIXED_TIME


def test_generate_should_be_reproducible_with_same_seed(fixed_clock: MagicMock) -> None:
    """
    Tests that two generators seeded identically produce identical output.
    """
    # Arrange
    first = RandomMetricsGenerator(random.Random(5), 0, 10, clock=fixed_clock)
    second = RandomMetricsGenerator(random.Random(5), 0, 10, clock=fixed_clock)

    # Act / Assert
    for _ in range(10):
        assert first.generate() == second.generate()


def test_generate_should_read_clock_per_kernel_upgrade_metric(fixed_clock: MagicMock) -> None:
    """
    Tests that the clock is consulted once for each last_kernel_upgrade metric.
    """
    # Arrange
    generator = RandomMetricsGenerator(random.Random(3), 20, 20, clock=fixed_clock)

    # Act
    envelopes = generator.generate()

    # Assert
    expected = sum(1 for envelope in envelopes if envelope.kind is MetricKind.LAST_KERNEL_UPGRADE)
    assert fixed_clock.call_count == expected


@pytest.mark.parametrize("min_count, max_count", [(5, 1), (-1, 3), (0, -2)])
def test_constructor_should_reject_invalid_bounds(min_count: int, max_count: int) -> None:
    """
    Tests that inverted or negative bounds are rejected.
    """
    # Act / Assert
    with pytest.raises(ValueError):
        RandomMetricsGenerator(random.Random(), min_count, max_count)


def test_utc_now_should_return_timezone_aware_time() -> None:
    """
    Tests that the default clock returns an aware UTC datetime.
    """
    # Act
    now = utc_now()

    # Assert
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 0

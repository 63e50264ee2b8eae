"""
Domain models for the demoware mock metrics server.

This module defines the metric kinds, their typed payloads and the envelope
that pairs a kind with its payload. Envelopes are immutable and can only be
built through the per-kind constructors, so a kind and its payload shape
always agree.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Sequence, Tuple, Union

from demoware.config.constants import CPU_USAGE_CORES


class MetricKind(str, Enum):
    """
    The kinds of synthetic metrics the server can emit.

    Inheriting from 'str' lets members serialize directly as their JSON tag.
    """

    LOAD_AVG = "load_avg"
    CPU_USAGE = "cpu_usage"
    LAST_KERNEL_UPGRADE = "last_kernel_upgrade"


class LoadAvgPayload(NamedTuple):
    """A synthetic load average in [0, 1)."""

    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value}


class CpuUsagePayload(NamedTuple):
    """Synthetic per-core usage: exactly CPU_USAGE_CORES values in [0, 1)."""

    value: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"value": list(self.value)}


class KernelUpgradePayload(NamedTuple):
    """
    The wall-clock time at which the metric was generated.

    This is not a real kernel event; it only gives clients a timestamp field
    to parse. Serialized as an RFC3339 string.
    """

    value: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value.isoformat()}


MetricPayload = Union[LoadAvgPayload, CpuUsagePayload, KernelUpgradePayload]


class MetricEnvelope(NamedTuple):
    """
    A metric kind tag paired with its typed payload.

    Attributes:
        kind: The discriminator, serialized as the "type" field.
        payload: The payload matching the kind.
    """

    kind: MetricKind
    payload: MetricPayload

    @classmethod
    def load_avg(cls, value: float) -> "MetricEnvelope":
        return cls(MetricKind.LOAD_AVG, LoadAvgPayload(value))

    @classmethod
    def cpu_usage(cls, values: Sequence[float]) -> "MetricEnvelope":
        if len(values) != CPU_USAGE_CORES:
            raise ValueError(
                f"cpu_usage requires exactly {CPU_USAGE_CORES} values, got {len(values)}"
            )
        return cls(MetricKind.CPU_USAGE, CpuUsagePayload(tuple(values)))

    @classmethod
    def last_kernel_upgrade(cls, value: datetime) -> "MetricEnvelope":
        return cls(MetricKind.LAST_KERNEL_UPGRADE, KernelUpgradePayload(value))

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready {"type": ..., "payload": ...} mapping."""
        return {"type": self.kind.value, "payload": self.payload.to_dict()}


def envelopes_to_json_ready(envelopes: Sequence[MetricEnvelope]) -> List[Dict[str, Any]]:
    """Convert envelopes to plain data, preserving generation order."""
    return [envelope.to_dict() for envelope in envelopes]

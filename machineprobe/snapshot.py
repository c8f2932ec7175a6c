"""
Machine Snapshot

The unified, immutable result of one probe invocation.
"""

import logging
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Mapping

logger = logging.getLogger("machineprobe.snapshot")

INT_FIELDS = ("total_memory_bytes", "available_memory_bytes")
FLOAT_FIELDS = ("cpu_utilization", "temperature_celsius")


@dataclass(frozen=True)
class MachineSnapshot:
    """Static and near-static identity and capacity facts of the local machine."""
    os_name: str = ""
    os_version: str = ""
    processor_model: str = ""
    processor_serial: str = ""
    hardware_uuid: str = ""
    machine_guid: str = ""
    total_memory_bytes: int = 0
    available_memory_bytes: int = 0
    cpu_utilization: float = 0.0
    temperature_celsius: float = 0.0
    platform: str = "unknown"

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> "MachineSnapshot":
        """
        Build a snapshot from a partial mapping of probed fields.

        Unknown keys are ignored, ``None`` becomes the field's zero value,
        numeric fields are coerced and kept non-negative and utilization is
        clamped to [0, 1].
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        for name, value in values.items():
            if name not in known or value is None:
                continue

            if name in INT_FIELDS:
                kwargs[name] = max(0, _to_int(value))
            elif name in FLOAT_FIELDS:
                kwargs[name] = max(0.0, _to_float(value))
            else:
                kwargs[name] = str(value).strip()

        if "cpu_utilization" in kwargs:
            kwargs["cpu_utilization"] = min(1.0, kwargs["cpu_utilization"])

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the snapshot as a plain dictionary."""
        return asdict(self)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Discarding non-integer value: {value!r}")
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Discarding non-numeric value: {value!r}")
        return 0.0

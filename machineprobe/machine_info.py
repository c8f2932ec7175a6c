"""
Machine Info Assembler

Detects the platform family, runs the matching probe once and returns an
immutable MachineSnapshot. Acquisition can take seconds (dmidecode, WMI),
so callers that need the snapshot repeatedly should hold it in a
MachineInfoCache rather than re-probing.
"""

import sys
import logging
import threading
from typing import Dict, Any, Optional

from .probes import (
    CpuUtilizationCounter,
    GenericProbe,
    LinuxProbe,
    MachinePlatformProbe,
    WindowsProbe,
)
from .snapshot import MachineSnapshot
from .utils import get_default_config

logger = logging.getLogger("machineprobe.machine_info")

PROBES = {
    "windows": WindowsProbe,
    "linux": LinuxProbe,
}


def detect_platform() -> str:
    """Return "windows", "linux" or "unknown" for the running interpreter."""
    if sys.platform == "win32":
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return "unknown"


def select_probe(
    platform_name: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None
) -> MachinePlatformProbe:
    """
    Instantiate the probe for a platform family.

    Args:
        platform_name: Result of detect_platform(); detected if None
        config: Configuration dictionary

    Returns:
        A probe instance; GenericProbe for unsupported platforms
    """
    platform_name = platform_name or detect_platform()
    probe_cls = PROBES.get(platform_name, GenericProbe)
    return probe_cls(config)


def probe_machine(
    config: Optional[Dict[str, Any]] = None,
    probe: Optional[MachinePlatformProbe] = None,
    counter: Optional[CpuUtilizationCounter] = None,
) -> MachineSnapshot:
    """
    Probe the local machine once.

    Never raises: a failing probe is logged and the snapshot is built from
    whatever fields were collected before the failure.

    Args:
        config: Configuration dictionary
        probe: Probe to run instead of the detected one
        counter: Warmed-up utilization counter to sample. When None a new
            counter is acquired, which is not ready yet, so utilization
            reads 0.0 on this snapshot.

    Returns:
        MachineSnapshot for this invocation
    """
    config = config or get_default_config()
    probe_config = config.get("probe", {})

    if counter is None:
        counter = CpuUtilizationCounter.acquire(
            float(probe_config.get("cpu_warmup_seconds", 1.0))
        )

    if probe is None:
        probe = select_probe(detect_platform(), config)

    fields: Dict[str, Any] = {}
    try:
        with probe:
            fields.update(probe.probe())
    except Exception as e:
        logger.error(f"{probe.probe_name} failed: {e}")
        fields.update(probe.fields)

    fields["cpu_utilization"] = counter.sample()
    fields["platform"] = probe.platform_name

    snapshot = MachineSnapshot.from_fields(fields)
    logger.debug(f"Probed {snapshot.platform}: {snapshot}")
    return snapshot


class MachineInfoCache:
    """
    Caller-owned holder for a machine snapshot.

    Only one probe runs at a time; concurrent callers of ``get()`` wait for
    the in-flight probe and share its result. The utilization counter is
    acquired once and reused, so snapshots after the first carry a real
    utilization reading once warm-up has finished.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or get_default_config()
        self._snapshot: Optional[MachineSnapshot] = None
        self._counter: Optional[CpuUtilizationCounter] = None
        self._lock = threading.Lock()
        self._counter_lock = threading.Lock()

    @property
    def counter(self) -> CpuUtilizationCounter:
        with self._counter_lock:
            if self._counter is None:
                warmup = float(self.config.get("probe", {}).get("cpu_warmup_seconds", 1.0))
                self._counter = CpuUtilizationCounter.acquire(warmup)
            return self._counter

    @property
    def snapshot(self) -> Optional[MachineSnapshot]:
        """The cached snapshot, or None if nothing has been probed yet."""
        return self._snapshot

    def get(self) -> MachineSnapshot:
        """Return the cached snapshot, probing on first use."""
        with self._lock:
            if self._snapshot is None:
                self._snapshot = probe_machine(self.config, counter=self.counter)
            return self._snapshot

    def refresh(self) -> MachineSnapshot:
        """Probe again and replace the cached snapshot."""
        with self._lock:
            self._snapshot = probe_machine(self.config, counter=self.counter)
            return self._snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None

    def cpu_utilization(self) -> float:
        """Fresh utilization sample, independent of the cached snapshot."""
        return self.counter.sample()

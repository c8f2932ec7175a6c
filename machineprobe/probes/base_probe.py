"""
Base Platform Probe Interface

Every platform family implements MachinePlatformProbe. The snapshot
assembler only talks to this interface, so adding a platform means adding
one subclass and registering it in ``machine_info.select_probe``.
"""

import logging
import platform
from abc import ABC, abstractmethod
from typing import Callable, Dict, Any, Optional, List, Sequence, Tuple

import psutil

from ..utils import get_default_config, merge_config

logger = logging.getLogger("machineprobe.probes")

ProbeStep = Tuple[str, Callable[[], Dict[str, Any]]]


class MachinePlatformProbe(ABC):
    """
    Abstract base class for platform probes.

    Subclasses list their acquisition steps; ``probe()`` runs them in order
    and merges each step's fields into ``self.fields``. A step that raises
    is recorded and skipped, so fields from earlier steps are always kept.

    Example:
        class MyPlatformProbe(MachinePlatformProbe):
            platform_name = "myos"

            def steps(self):
                return [("os", lambda: {"os_name": "MyOS"})]
    """

    platform_name = "unknown"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the probe with optional configuration.

        Args:
            config: Optional dictionary containing probe settings. Missing
                keys, including individual paths, fall back to defaults.
        """
        self.config = merge_config(get_default_config(), config or {})
        self.fields: Dict[str, Any] = {}
        self._errors: List[str] = []

    @property
    def probe_name(self) -> str:
        """Return the name of this probe."""
        return self.__class__.__name__

    @property
    def errors(self) -> List[str]:
        """Messages recorded by failed acquisition steps."""
        return list(self._errors)

    @property
    def probe_config(self) -> Dict[str, Any]:
        return self.config.get("probe", {})

    @property
    def paths(self) -> Dict[str, Any]:
        return self.config.get("paths", {})

    @abstractmethod
    def steps(self) -> Sequence[ProbeStep]:
        """
        Acquisition steps in execution order.

        Returns:
            Sequence of (name, callable) pairs; each callable returns a
            dictionary of MachineSnapshot field values
        """
        pass

    def probe(self) -> Dict[str, Any]:
        """
        Run every step and collect its fields.

        Returns:
            Dictionary mapping MachineSnapshot field names to values
        """
        self.fields = {}
        for name, step in self.steps():
            try:
                self.fields.update(step() or {})
            except Exception as e:
                self.record_error(f"{name} step failed: {e}")
        return dict(self.fields)

    def cleanup(self) -> None:
        """Release any resources held by the probe."""
        pass

    def record_error(self, error_message: str) -> None:
        """
        Record a failed acquisition step.

        Args:
            error_message: Description of the error
        """
        self._errors.append(error_message)
        logger.debug(f"{self.probe_name}: {error_message}")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.cleanup()
        return False


class GenericProbe(MachinePlatformProbe):
    """Portable facts for platforms outside the two supported families."""

    def steps(self) -> Sequence[ProbeStep]:
        return [
            ("os", self._probe_os),
            ("memory", self._probe_memory),
        ]

    def _probe_os(self) -> Dict[str, Any]:
        return {
            "os_name": platform.system(),
            "os_version": platform.release(),
            "processor_model": platform.processor(),
        }

    def _probe_memory(self) -> Dict[str, Any]:
        mem = psutil.virtual_memory()
        return {
            "total_memory_bytes": int(mem.total),
            "available_memory_bytes": int(mem.available),
        }

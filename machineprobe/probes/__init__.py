"""
Platform Probes

One probe per supported platform family. Each implements
MachinePlatformProbe and fills MachineSnapshot fields.

Available Probes:
    - windows_probe: WMI, registry and performance counters
    - linux_probe: /proc and /sys pseudo-files, release files, dmidecode
    - base_probe.GenericProbe: portable facts for other platforms
"""

from .base_probe import MachinePlatformProbe, GenericProbe
from .cpu_counter import CpuUtilizationCounter
from .linux_probe import LinuxProbe, get_linux_name
from .windows_probe import WindowsProbe, query_property

__all__ = [
    "MachinePlatformProbe",
    "GenericProbe",
    "CpuUtilizationCounter",
    "LinuxProbe",
    "WindowsProbe",
    "get_linux_name",
    "query_property",
]

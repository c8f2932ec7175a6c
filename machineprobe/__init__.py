"""
machineprobe - Local Machine Identity and Capacity Snapshot

Probes the host for OS name/version, processor model and serial, hardware
UUID, machine GUID, memory, CPU utilization and temperature, on Windows
(WMI, registry) and Linux (/proc, /sys, dmidecode).

Modules:
    - machine_info: Platform detection, snapshot assembly and caching
    - snapshot: MachineSnapshot data model
    - readers: Key/value text extraction, file and command readers
    - probes: Platform-specific probes
    - utils: Configuration and logging helpers
"""

from .machine_info import MachineInfoCache, detect_platform, probe_machine, select_probe
from .snapshot import MachineSnapshot

__version__ = "1.0.0"
__license__ = "Apache-2.0"

__all__ = [
    "MachineInfoCache",
    "MachineSnapshot",
    "detect_platform",
    "probe_machine",
    "select_probe",
]

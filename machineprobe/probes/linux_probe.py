"""
Linux Platform Probe

Reads /proc and /sys pseudo-files, the distribution release files and,
when installed, the output of dmidecode.
"""

import os
import shutil
import logging
import platform
from typing import Dict, Any, Optional, Sequence

from ..readers import (
    COMMAND_TIMEOUT,
    execute,
    find_in_text,
    read_keyed,
    read_text,
    split_as_dict,
)
from ..utils import get_default_config
from .base_probe import MachinePlatformProbe, ProbeStep

logger = logging.getLogger("machineprobe.probes.linux")

# Compact boards (Raspberry Pi) expose the board name as "Model"
MODEL_KEYS = ("Model",)
# Tried one at a time, in this order, when "Model" is absent
PROCESSOR_KEYS = ("cpu model", "model name", "Hardware")
SERIAL_KEYS = ("Serial", "serial")


def parse_kb(value: str) -> int:
    """
    Convert a meminfo value such as ``"16384000 kB"`` to bytes.

    Returns 0 if the number cannot be parsed.
    """
    text = value.strip()
    if text.endswith("kB"):
        text = text[:-2].strip()

    try:
        return int(text) * 1024
    except ValueError:
        logger.debug(f"Unparseable meminfo value: {value!r}")
        return 0


def parse_millidegrees(value: str) -> float:
    """Convert a thermal-zone reading in millidegrees to degrees Celsius."""
    try:
        return float(value.strip()) / 1000
    except ValueError:
        logger.debug(f"Unparseable thermal reading: {value!r}")
        return 0.0


def get_linux_name(paths: Optional[Dict[str, Any]] = None) -> str:
    """
    Resolve the distribution name.

    Checks /etc/redhat-release, then /etc/debian-release, then the
    PRETTY_NAME entry of /etc/os-release. The first file that exists wins,
    even when it does not yield a name.

    Args:
        paths: Optional override of the ``paths`` config section; keys it
            leaves out use the default locations

    Returns:
        Distribution name, or "" if none of the files exist
    """
    paths = {**get_default_config()["paths"], **(paths or {})}

    for key in ("redhat_release", "debian_release"):
        marker = paths.get(key)
        if marker and os.path.exists(marker):
            return read_text(marker).strip()

    os_release = paths.get("os_release")
    if os_release and os.path.exists(os_release):
        entries = split_as_dict(read_text(os_release), "=", "\n", trim_quotes=True)
        return entries.get("PRETTY_NAME", "").strip()

    return ""


class LinuxProbe(MachinePlatformProbe):
    """
    Flat-file probe for Linux.

    Collects:
        - Distribution name and kernel release
        - Processor model and serial from /proc/cpuinfo
        - Total and available memory from /proc/meminfo
        - Thermal zone 0 temperature
        - Processor ID and system UUID from dmidecode (when available)
    """

    platform_name = "linux"

    def steps(self) -> Sequence[ProbeStep]:
        return [
            ("os", self._probe_os),
            ("processor", self._probe_processor),
            ("memory", self._probe_memory),
            ("thermal", self._probe_thermal),
            ("dmidecode", self._probe_dmidecode),
        ]

    def _probe_os(self) -> Dict[str, Any]:
        return {
            "os_name": get_linux_name(self.paths),
            "os_version": platform.release(),
        }

    def _probe_processor(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        cpuinfo = self.paths["cpuinfo"]

        model = self._first_of(cpuinfo, MODEL_KEYS) or self._first_of(cpuinfo, PROCESSOR_KEYS)
        if model:
            result["processor_model"] = model

        serial, found = read_keyed(cpuinfo, SERIAL_KEYS)
        if found:
            result["processor_serial"] = serial
        return result

    def _probe_memory(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        meminfo = self.paths["meminfo"]

        value, found = read_keyed(meminfo, ["MemTotal"])
        if found:
            result["total_memory_bytes"] = parse_kb(value)
        value, found = read_keyed(meminfo, ["MemAvailable"])
        if found:
            result["available_memory_bytes"] = parse_kb(value)
        return result

    def _probe_thermal(self) -> Dict[str, Any]:
        value, found = read_keyed(self.paths["thermal_zone"], None)
        if not found:
            return {}
        return {"temperature_celsius": parse_millidegrees(value)}

    def _first_of(self, path: str, keys: Sequence[str]) -> str:
        """
        Return the value of the first key in ``keys`` present in ``path``.

        Keys are tried one at a time over the whole file, so list order
        decides between keys, not line order. A single multi-key ``find``
        would instead return whichever matching line comes first.
        """
        for key in keys:
            value, found = read_keyed(path, [key])
            if found:
                return value
        return ""

    def _probe_dmidecode(self) -> Dict[str, Any]:
        """Scan the dmidecode dump for processor ID and system UUID."""
        if not self.probe_config.get("use_dmidecode", True):
            return {}

        command = self.probe_config.get("dmidecode_command", "dmidecode")
        if shutil.which(command) is None:
            self.record_error(f"{command} not found")
            return {}

        timeout = float(self.probe_config.get("command_timeout", COMMAND_TIMEOUT))
        output = execute(command, timeout=timeout)
        if not output:
            self.record_error(f"{command} returned no output")
            return {}

        result: Dict[str, Any] = {}
        value, found = find_in_text(output, ["ID"])
        if found:
            result["processor_serial"] = value.replace(" ", "")
        value, found = find_in_text(output, ["UUID"])
        if found:
            result["hardware_uuid"] = value
        return result

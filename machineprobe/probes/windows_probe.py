"""
Windows Platform Probe

Queries WMI for processor, board and thermal-zone properties, reads the
machine GUID from the registry and memory figures from psutil.
"""

import sys
import logging
import platform
from typing import Dict, Any, List, Sequence

import psutil

if sys.platform == "win32":
    import winreg
    try:
        import wmi
        import pythoncom
        HAS_WMI = True
    except ImportError:
        HAS_WMI = False
        wmi = None
        pythoncom = None
else:
    HAS_WMI = False
    wmi = None
    pythoncom = None
    winreg = None

from .base_probe import MachinePlatformProbe, ProbeStep

logger = logging.getLogger("machineprobe.probes.windows")

PROPERTY_DELIMITER = ","
DEFAULT_NAMESPACE = "root\\cimv2"
THERMAL_NAMESPACE = "root\\wmi"
MACHINE_GUID_KEY = r"SOFTWARE\Microsoft\Cryptography"


def query_property(object_class: str, property_name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """
    Read one property from every instance of a WMI class.

    Values are collected per row (rows without the property are skipped),
    sorted, de-duplicated and joined with PROPERTY_DELIMITER.

    Args:
        object_class: WMI class, e.g. "Win32_Processor"
        property_name: Property to select, e.g. "Name"
        namespace: WMI namespace to connect to

    Returns:
        Joined values, or "" if WMI is unavailable or the query fails
    """
    if not HAS_WMI or wmi is None:
        return ""

    values: List[str] = []
    try:
        conn = wmi.WMI(namespace=namespace)
        rows = conn.query(f"SELECT {property_name} FROM {object_class}")
        for row in rows:
            if row is None:
                continue
            value = getattr(row, property_name, None)
            if value is not None:
                values.append(str(value))
    except Exception as e:
        logger.warning(f"WMI query {object_class}.{property_name} failed: {e}")
        return ""

    return PROPERTY_DELIMITER.join(sorted(set(values)))


def read_machine_guid() -> str:
    """
    Read MachineGuid from HKLM\\SOFTWARE\\Microsoft\\Cryptography.

    The default registry view is tried first; a 32-bit interpreter on a
    64-bit system sees a redirected hive there, so the explicit 64-bit view
    is tried when the first read yields nothing.
    """
    if winreg is None:
        return ""

    for access in (winreg.KEY_READ, winreg.KEY_READ | winreg.KEY_WOW64_64KEY):
        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, MACHINE_GUID_KEY, 0, access) as key:
                value, _ = winreg.QueryValueEx(key, "MachineGuid")
        except OSError as e:
            logger.debug(f"MachineGuid lookup failed: {e}")
            continue

        if value:
            return str(value).strip()

    return ""


def thermal_zone_to_celsius(raw: float) -> float:
    """
    Convert an ACPI thermal-zone reading (tenths of Kelvin) to Celsius.

    Board-level reading, not the CPU die. Firmware encodings vary, so treat
    the result as an approximation.
    """
    return (raw - 2732) / 10.0


def normalize_os_name(full_name: str, version: str = "") -> str:
    """Strip the "Microsoft" vendor prefix and a trailing version from an OS name."""
    name = (full_name or "").strip()
    if name.startswith("Microsoft"):
        name = name[len("Microsoft"):]
    name = name.strip()
    if version and name.endswith(version):
        name = name[:-len(version)]
    return name.strip()


class WindowsProbe(MachinePlatformProbe):
    """
    WMI-backed probe for Windows.

    Collects:
        - OS caption and version
        - Machine GUID from the registry
        - Total and available physical memory
        - Processor name and ProcessorId
        - System product UUID
        - ACPI thermal-zone temperature (approximate)
    """

    platform_name = "windows"

    def probe(self) -> Dict[str, Any]:
        """Collect facts from WMI, the registry and psutil."""
        com_initialized = False
        if HAS_WMI and pythoncom is not None:
            try:
                pythoncom.CoInitialize()
                com_initialized = True
            except Exception as e:
                self.record_error(f"CoInitialize failed: {e}")

        try:
            return super().probe()
        finally:
            if com_initialized:
                pythoncom.CoUninitialize()

    def steps(self) -> Sequence[ProbeStep]:
        return [
            ("os", self._probe_os),
            ("machine_guid", self._probe_machine_guid),
            ("memory", self._probe_memory),
            ("processor", self._probe_processor),
            ("thermal", self._probe_thermal),
        ]

    def _probe_os(self) -> Dict[str, Any]:
        version = query_property("Win32_OperatingSystem", "Version") or platform.version()
        caption = query_property("Win32_OperatingSystem", "Caption")
        if not caption:
            caption = f"{platform.system()} {platform.release()}"
        return {
            "os_name": normalize_os_name(caption, version),
            "os_version": version,
        }

    def _probe_machine_guid(self) -> Dict[str, Any]:
        return {"machine_guid": read_machine_guid()}

    def _probe_memory(self) -> Dict[str, Any]:
        mem = psutil.virtual_memory()
        return {
            "total_memory_bytes": int(mem.total),
            "available_memory_bytes": int(mem.available),
        }

    def _probe_processor(self) -> Dict[str, Any]:
        return {
            "processor_model": query_property("Win32_Processor", "Name"),
            "processor_serial": query_property("Win32_Processor", "ProcessorId"),
            "hardware_uuid": query_property("Win32_ComputerSystemProduct", "UUID"),
        }

    def _probe_thermal(self) -> Dict[str, Any]:
        raw = query_property("MSAcpi_ThermalZoneTemperature", "CurrentTemperature", THERMAL_NAMESPACE)
        if not raw:
            return {}

        first = raw.split(PROPERTY_DELIMITER)[0]
        try:
            return {"temperature_celsius": thermal_zone_to_celsius(float(first))}
        except ValueError:
            self.record_error(f"Unparseable thermal reading: {raw!r}")
            return {}

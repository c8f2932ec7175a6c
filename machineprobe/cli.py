"""
machineprobe Command Line

Probes the local machine once and prints the snapshot.

Usage:
    machineprobe [--config path/to/config.yaml] [--format text|json|yaml]
"""

import sys
import json
import logging
import argparse
from typing import List, Optional

import yaml

from .machine_info import MachineInfoCache
from .snapshot import MachineSnapshot
from .utils import load_config, setup_logging

logger = logging.getLogger("machineprobe.cli")

LABELS = {
    "os_name": "OS",
    "os_version": "OS version",
    "processor_model": "Processor",
    "processor_serial": "Processor ID",
    "hardware_uuid": "UUID",
    "machine_guid": "Machine GUID",
    "total_memory_bytes": "Memory",
    "available_memory_bytes": "Available memory",
    "cpu_utilization": "CPU",
    "temperature_celsius": "Temperature",
    "platform": "Platform",
}


def format_text(snapshot: MachineSnapshot) -> str:
    """Render a snapshot as aligned ``label: value`` lines."""
    data = snapshot.to_dict()
    data["total_memory_bytes"] = f"{data['total_memory_bytes'] / (1024**3):.2f} GB"
    data["available_memory_bytes"] = f"{data['available_memory_bytes'] / (1024**3):.2f} GB"
    data["cpu_utilization"] = f"{data['cpu_utilization'] * 100:.1f} %"
    data["temperature_celsius"] = f"{data['temperature_celsius']:.1f} °C"

    width = max(len(label) for label in LABELS.values())
    return "\n".join(
        f"{LABELS[name]:<{width}} : {value}" for name, value in data.items()
    )


def format_snapshot(snapshot: MachineSnapshot, output_format: str = "text") -> str:
    if output_format == "json":
        return json.dumps(snapshot.to_dict(), indent=2)
    if output_format == "yaml":
        return yaml.safe_dump(snapshot.to_dict(), default_flow_style=False, sort_keys=False)
    return format_text(snapshot)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the machineprobe command."""
    parser = argparse.ArgumentParser(
        description="machineprobe - Local machine identity and capacity snapshot"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
        default=None
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--format",
        choices=["text", "json", "yaml"],
        default="text",
        help="Output format"
    )
    parser.add_argument(
        "--wait-cpu",
        action="store_true",
        help="Wait for the CPU counter to warm up before sampling"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.verbose:
        config.setdefault("debug", {})["verbose"] = True
        config["debug"]["log_level"] = "DEBUG"
    setup_logging(config)

    cache = MachineInfoCache(config)
    if args.wait_cpu:
        cache.counter.wait(timeout=5)
    snapshot = cache.get()

    print(format_snapshot(snapshot, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())

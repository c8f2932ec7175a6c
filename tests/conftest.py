"""
Pytest Configuration and Fixtures

Provides shared fixtures and configuration for all tests.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from machineprobe.utils import get_default_config


CPUINFO_X86 = """processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 151
model name\t: Example CPU
flags\t\t: fpu vme de pse

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: Example CPU
"""

MEMINFO = """MemTotal:       16384000 kB
MemFree:         1024000 kB
MemAvailable:    8192000 kB
Buffers:          102400 kB
"""

OS_RELEASE = """NAME="Ubuntu"
VERSION="22.04.3 LTS (Jammy Jellyfish)"
ID=ubuntu
PRETTY_NAME="Ubuntu 22.04.3 LTS"
"""


@pytest.fixture
def default_config():
    """Provide default configuration."""
    return get_default_config()


@pytest.fixture
def fake_root(tmp_path):
    """Provide a directory holding fake pseudo-files and release files."""
    (tmp_path / "cpuinfo").write_text(CPUINFO_X86)
    (tmp_path / "meminfo").write_text(MEMINFO)
    (tmp_path / "temp").write_text("45500\n")
    (tmp_path / "os-release").write_text(OS_RELEASE)
    return tmp_path


@pytest.fixture
def fake_config(fake_root):
    """Provide config pointing every path at fake_root, dmidecode disabled."""
    config = get_default_config()
    config["probe"]["use_dmidecode"] = False
    config["probe"]["cpu_warmup_seconds"] = 0
    config["paths"] = {
        "cpuinfo": str(fake_root / "cpuinfo"),
        "meminfo": str(fake_root / "meminfo"),
        "thermal_zone": str(fake_root / "temp"),
        "redhat_release": str(fake_root / "redhat-release"),
        "debian_release": str(fake_root / "debian-release"),
        "os_release": str(fake_root / "os-release"),
    }
    return config

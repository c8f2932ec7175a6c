"""
machineprobe Utility Functions

This module provides helper functions for:
    - Configuration management
    - Logging utilities
"""

import os
import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from platformdirs import user_config_dir

# Configure module logger
logger = logging.getLogger("machineprobe")

CONFIG_ENV_VAR = "MACHINEPROBE_CONFIG"


# =============================================================================
# Configuration Management
# =============================================================================

def get_default_config_path() -> Path:
    """
    Resolve the configuration file location.

    Order: the MACHINEPROBE_CONFIG environment variable, the project
    ``configs/config.yaml``, then the per-user config directory.
    """
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()

    project_root = Path(__file__).parent.parent
    project_config = project_root / "configs" / "config.yaml"
    if project_config.exists():
        return project_config

    return Path(user_config_dir("machineprobe")) / "config.yaml"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Sections found in the file are merged over the defaults, so a partial
    file only overrides what it names.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except Exception as e:
        logger.error(f"Error loading config: {e}")
        return get_default_config()

    if not isinstance(loaded, dict):
        return get_default_config()
    return merge_config(get_default_config(), loaded)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "probe": {
            "command_timeout": 3.0,
            "use_dmidecode": True,
            "dmidecode_command": "dmidecode",
            "cpu_warmup_seconds": 1.0,
        },
        "paths": {
            "cpuinfo": "/proc/cpuinfo",
            "meminfo": "/proc/meminfo",
            "thermal_zone": "/sys/class/thermal/thermal_zone0/temp",
            "redhat_release": "/etc/redhat-release",
            "debian_release": "/etc/debian-release",
            "os_release": "/etc/os-release",
        },
        "debug": {
            "verbose": False,
            "log_level": "INFO",
            "save_debug_logs": False,
            "debug_log_file": "logs/debug.log",
        },
    }


def save_config(config: Dict[str, Any], config_path: Optional[str] = None) -> bool:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save config file

    Returns:
        True if successful, False otherwise
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = Path(config_path)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        return True
    except Exception as e:
        logger.error(f"Error saving config: {e}")
        return False


# =============================================================================
# Logging Utilities
# =============================================================================

def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Set up logging for machineprobe.

    Args:
        config: Configuration dictionary

    Returns:
        Configured logger
    """
    config = config or get_default_config()
    debug_config = config.get("debug", {})

    log_level = getattr(logging, str(debug_config.get("log_level", "INFO")).upper(), logging.INFO)
    verbose = debug_config.get("verbose", False)

    # Configure package logger
    logger = logging.getLogger("machineprobe")
    logger.setLevel(log_level)

    # Console handler
    if verbose or log_level == logging.DEBUG:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler (if enabled)
    if debug_config.get("save_debug_logs", False):
        log_file = Path(debug_config.get("debug_log_file", "logs/debug.log"))
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger

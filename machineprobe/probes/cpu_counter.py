"""
CPU Utilization Counter

Two-phase resource: ``acquire()`` returns at once and primes the counter on
a background thread; ``sample()`` returns 0.0 until that warm-up finishes.
A snapshot taken before warm-up completes therefore reports no utilization.
"""

import time
import logging
import threading
from typing import Optional

import psutil

logger = logging.getLogger("machineprobe.probes.cpu_counter")


class CpuUtilizationCounter:
    """System-wide CPU utilization as a fraction in [0, 1]."""

    def __init__(self, warmup_seconds: float = 1.0):
        self.warmup_seconds = warmup_seconds
        self._ready = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def acquire(cls, warmup_seconds: float = 1.0) -> "CpuUtilizationCounter":
        """Create a counter and start warming it up without waiting."""
        counter = cls(warmup_seconds)
        counter.start()
        return counter

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def start(self) -> None:
        """Start the warm-up thread if it is not already running."""
        if self._thread is not None:
            return

        self._thread = threading.Thread(
            target=self._warm_up,
            name="CpuCounterWarmup",
            daemon=True
        )
        self._thread.start()

    def _warm_up(self) -> None:
        try:
            # First call establishes the baseline and always returns 0.0
            psutil.cpu_percent(interval=None)
            if self.warmup_seconds > 0:
                time.sleep(self.warmup_seconds)
            self._ready.set()
        except Exception as e:
            logger.warning(f"CPU counter warm-up failed: {e}")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until warm-up completes. Returns True if the counter is ready."""
        return self._ready.wait(timeout)

    def sample(self) -> float:
        """Return utilization since the previous sample, or 0.0 before warm-up."""
        if not self._ready.is_set():
            return 0.0

        try:
            percent = psutil.cpu_percent(interval=None)
        except Exception as e:
            logger.debug(f"cpu_percent failed: {e}")
            return 0.0

        return min(1.0, max(0.0, percent / 100.0))

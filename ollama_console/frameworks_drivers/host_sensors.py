import logging
from typing import Optional, Tuple

import psutil

from ollama_console.entities.system import MemoryStats
from ollama_console.shared.errors import SensorReadError
from ollama_console.shared.gpu_utils import GPUUtils

logger = logging.getLogger(__name__)


class CpuSensor:
    """CPU load and topology through psutil."""

    def __init__(self, sample_interval: float = 0.1):
        self.sample_interval = sample_interval

    def read_usage(self) -> float:
        try:
            return float(psutil.cpu_percent(interval=self.sample_interval))
        except (OSError, psutil.Error) as e:
            raise SensorReadError(f"Could not read CPU load: {e}") from e

    def read_topology(self) -> Tuple[Optional[int], Optional[int]]:
        """(physical cores, logical processors); either may be None when the OS does not say."""
        try:
            return psutil.cpu_count(logical=False), psutil.cpu_count(logical=True)
        except (OSError, psutil.Error) as e:
            raise SensorReadError(f"Could not read CPU topology: {e}") from e


class MemorySensor:
    """Virtual memory totals through psutil."""

    def read_memory(self) -> MemoryStats:
        try:
            mem = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise SensorReadError(f"Could not read memory: {e}") from e
        return MemoryStats(used=GPUUtils.bytes_to_gib(mem.used), total=GPUUtils.bytes_to_gib(mem.total))

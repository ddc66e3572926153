import asyncio
import logging
import math
from typing import Optional

from ollama_console.entities.system import CpuStats, GpuSnapshot, MemoryStats, SystemSnapshot
from ollama_console.shared.errors import SensorReadError
from ollama_console.shared.gpu_utils import NO_GPU_NAME
from ollama_console.shared.protocols import CpuSensorProtocol, GpuSensorProtocol, MemorySensorProtocol

logger = logging.getLogger(__name__)

DEFAULT_CORES = 4
DEFAULT_THREADS = 8


def no_gpu_placeholder() -> GpuSnapshot:
    return GpuSnapshot(id=0, name=NO_GPU_NAME, usage=0.0, memory=MemoryStats(used=0.0, total=0.0))


class MetricsCollector:
    """Builds one SystemSnapshot from independent host sensor reads."""

    def __init__(self, cpu_sensor: CpuSensorProtocol, memory_sensor: MemorySensorProtocol,
                 gpu_sensor: Optional[GpuSensorProtocol] = None):
        self.cpu_sensor = cpu_sensor
        self.memory_sensor = memory_sensor
        self.gpu_sensor = gpu_sensor

    def _read_gpus(self) -> list[GpuSnapshot]:
        if self.gpu_sensor is None:
            return []
        return self.gpu_sensor.read_gpus()

    async def get_snapshot(self) -> SystemSnapshot:
        """
        Read CPU topology, CPU load, memory and graphics controllers concurrently.

        Raises SensorReadError if any read fails; no partial snapshot is returned.
        """
        try:
            (cores, threads), usage, memory, gpus = await asyncio.gather(
                asyncio.to_thread(self.cpu_sensor.read_topology),
                asyncio.to_thread(self.cpu_sensor.read_usage),
                asyncio.to_thread(self.memory_sensor.read_memory),
                asyncio.to_thread(self._read_gpus),
            )
        except SensorReadError:
            raise
        except Exception as e:
            raise SensorReadError(f"Sensor read failed: {e}") from e

        if not math.isfinite(usage):
            raise SensorReadError(f"CPU load is not a number: {usage}")

        if not gpus:
            gpus = [no_gpu_placeholder()]

        snapshot = SystemSnapshot(
            cpu=CpuStats(
                usage=round(min(max(usage, 0.0), 100.0), 1),
                cores=cores or DEFAULT_CORES,
                threads=threads or DEFAULT_THREADS,
            ),
            memory=memory,
            gpus=gpus,
        )
        logger.debug(f"Snapshot: cpu {snapshot.cpu.usage}%, GPU entries: {len(snapshot.gpus)}")
        return snapshot

"""
GPU telemetry through NVML. The nvidia-ml-py distribution provides the pynvml module;
hosts without an NVIDIA driver simply report no controllers.
"""
import logging
from typing import List, Optional

from ollama_console.entities.system import GpuSnapshot, MemoryStats
from ollama_console.frameworks_drivers.config import MetricsServerConfig
from ollama_console.shared.errors import SensorReadError
from ollama_console.shared.gpu_utils import GPUUtils

pynvml = GPUUtils.safe_import_pynvml()


class GPUMonitor:
    """Reads utilization and VRAM of every NVML device."""

    def __init__(self, config: Optional[MetricsServerConfig] = None):
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.initialized = False

        if config is not None and not config.enable_gpu_monitoring:
            self.logger.info("GPU monitoring disabled by configuration")
            return

        if pynvml is None:
            self.logger.warning("nvidia-ml-py not available, GPU monitoring disabled")
            return

        try:
            pynvml.nvmlInit()
            self.initialized = True
            self.logger.info("GPU monitoring initialized successfully")
        except pynvml.NVMLError as e:
            self.logger.warning(f"GPU monitoring not available: {e}")

    def get_gpu_count(self) -> int:
        """Get the number of NVML devices."""
        if not self.initialized or pynvml is None:
            return 0

        try:
            return pynvml.nvmlDeviceGetCount()
        except pynvml.NVMLError as e:
            raise SensorReadError(f"Could not count GPUs: {e}") from e

    def get_gpu_info(self, gpu_id: int) -> GpuSnapshot:
        """Snapshot of one device. Raises SensorReadError when the device cannot be read."""
        if not self.initialized or pynvml is None:
            raise SensorReadError("GPU monitoring is not initialized")

        try:
            handle = pynvml.nvmlDeviceGetHandleByIndex(gpu_id)

            raw_name = pynvml.nvmlDeviceGetName(handle)
            # Older bindings return bytes
            name = raw_name.decode("utf-8") if isinstance(raw_name, bytes) else raw_name

            memory_info = pynvml.nvmlDeviceGetMemoryInfo(handle)
        except pynvml.NVMLError as e:
            raise SensorReadError(f"Could not read GPU {gpu_id}: {e}") from e

        utilization = 0.0
        try:
            utilization = float(pynvml.nvmlDeviceGetUtilizationRates(handle).gpu)
        except pynvml.NVMLError:
            # Some GPUs do not report utilization
            self.logger.debug(f"GPU {gpu_id} does not report utilization")

        return GpuSnapshot(
            id=gpu_id,
            name=name or "Unknown GPU",
            usage=utilization,
            memory=MemoryStats(
                used=GPUUtils.bytes_to_gib(int(memory_info.used)),
                total=GPUUtils.bytes_to_gib(int(memory_info.total)),
            ),
        )

    def read_gpus(self) -> List[GpuSnapshot]:
        """Snapshot of every device, in index order. Empty when NVML is unavailable."""
        if not self.initialized or pynvml is None:
            return []
        return [self.get_gpu_info(i) for i in range(self.get_gpu_count())]

    def shutdown(self):
        """Clean shutdown of GPU monitoring."""
        if self.initialized and pynvml is not None:
            try:
                pynvml.nvmlShutdown()
                self.logger.info("GPU monitoring shut down successfully")
            except pynvml.NVMLError as e:
                self.logger.error(f"Error shutting down GPU monitoring: {e}")
            finally:
                self.initialized = False

"""
Shared GPU helpers: NVML import handling and placeholder detection.
"""
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from ollama_console.entities.system import GpuSnapshot, SystemSnapshot

NO_GPU_NAME = "No dedicated GPU detected"
OFFLINE_GPU_NAME = "Monitoring server offline - start the metrics server"

# Names that mark a placeholder entry rather than real hardware
_PLACEHOLDER_PREFIXES = ("no dedicated gpu detected", "monitoring server offline")

BYTES_PER_GIB = 1024 ** 3


class GPUUtils:
    """Utility class for GPU-related operations."""

    @staticmethod
    def safe_import_pynvml():
        """
        Safely import the NVML bindings (nvidia-ml-py installs them as pynvml).
        Returns the module if available, None otherwise.
        """
        try:
            import pynvml
            return pynvml
        except ImportError:
            return None

    @staticmethod
    def bytes_to_gib(value: int) -> float:
        return round(value / BYTES_PER_GIB, 2)

    @staticmethod
    def is_placeholder(gpu: 'GpuSnapshot') -> bool:
        return gpu.name.strip().lower().startswith(_PLACEHOLDER_PREFIXES)

    @staticmethod
    def usable_gpus(snapshot: 'SystemSnapshot') -> List['GpuSnapshot']:
        """GPUs that can take offloaded layers, placeholders excluded."""
        return [gpu for gpu in snapshot.gpus if not GPUUtils.is_placeholder(gpu)]

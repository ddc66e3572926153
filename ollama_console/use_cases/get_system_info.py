import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from ollama_console.entities.settings import ConsoleSettings
from ollama_console.entities.system import CpuStats, GpuSnapshot, MemoryStats, SystemSnapshot
from ollama_console.frameworks_drivers.metrics_client import MetricsClient
from ollama_console.shared.errors import ConsoleError
from ollama_console.shared.gpu_utils import OFFLINE_GPU_NAME
from ollama_console.shared.typing_reveal import invoke_callback

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[SystemSnapshot], Union[None, Awaitable[None]]]


def fallback_snapshot() -> SystemSnapshot:
    """Fixed snapshot shown while the metrics service cannot be reached."""
    return SystemSnapshot(
        cpu=CpuStats(usage=0.0, cores=4, threads=8),
        memory=MemoryStats(used=0.0, total=0.0),
        gpus=[GpuSnapshot(id=0, name=OFFLINE_GPU_NAME, usage=0.0, memory=MemoryStats(used=0.0, total=0.0))],
    )


class GetSystemInfo:
    def __init__(self, metrics_client: MetricsClient,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.metrics_client = metrics_client
        self.sleep = sleep

    async def execute(self) -> SystemSnapshot:
        try:
            return await self.metrics_client.fetch_snapshot()
        except ConsoleError as e:
            logger.warning(f"Using fallback system info: {e}")
            return fallback_snapshot()

    async def watch(self, on_snapshot: SnapshotCallback,
                    settings_source: Callable[[], ConsoleSettings],
                    max_polls: Optional[int] = None) -> int:
        """
        Deliver a snapshot now and then every refresh_interval seconds while auto_refresh is on.

        Settings are re-read before each pause, so switching auto_refresh off stops the
        loop after the current poll. Returns the number of snapshots delivered.
        """
        polls = 0
        while True:
            await invoke_callback(on_snapshot, await self.execute())
            polls += 1
            if max_polls is not None and polls >= max_polls:
                return polls
            settings = settings_source()
            if not settings.auto_refresh:
                return polls
            await self.sleep(settings.refresh_interval)

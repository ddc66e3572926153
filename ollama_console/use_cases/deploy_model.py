import logging
import re
from typing import List, Optional

from ollama_console.entities.deployment import DeployConfig, DeploymentRecord
from ollama_console.entities.system import SystemSnapshot
from ollama_console.frameworks_drivers.deployment_registry import DeploymentRegistry
from ollama_console.shared.gpu_utils import GPUUtils

logger = logging.getLogger(__name__)

# Context window suggested for well-known parameter counts
RECOMMENDED_CONTEXT_SIZES = {
    "7b": 4096,
    "13b": 4096,
    "34b": 8192,
    "70b": 8192,
}
DEFAULT_CONTEXT_SIZE = 4096
MAX_DEFAULT_THREADS = 8
ALL_LAYERS = 100

_PARAMETER_COUNT = re.compile(r"(\d+)b", re.IGNORECASE)


def recommend_deploy_config(model_name: str, snapshot: SystemSnapshot) -> DeployConfig:
    """Default deployment settings for a model on the host described by snapshot."""
    match = _PARAMETER_COUNT.search(model_name)
    size_key = f"{match.group(1)}b" if match else None
    context_size = RECOMMENDED_CONTEXT_SIZES.get(size_key, DEFAULT_CONTEXT_SIZE)

    threads = max(2, min(snapshot.cpu.threads // 2, MAX_DEFAULT_THREADS))

    gpus = GPUUtils.usable_gpus(snapshot)
    return DeployConfig(
        threads=threads,
        context_size=context_size,
        gpu_layers=ALL_LAYERS if gpus else 0,
        temperature=0.7,
        system_prompt="",
        parallel_executions=1,
        selected_gpu_ids={gpus[0].id} if gpus else set(),
    )


class DeployModel:
    """Deploy and stop actions of the deploy page."""

    def __init__(self, registry: DeploymentRegistry):
        self.registry = registry

    def recommend(self, model_name: str, snapshot: SystemSnapshot) -> DeployConfig:
        return recommend_deploy_config(model_name, snapshot)

    def deploy(self, name: str, config: DeployConfig, snapshot: Optional[SystemSnapshot] = None) -> DeploymentRecord:
        if not name or not name.strip():
            raise ValueError("Model name must be a non-empty string")
        if snapshot is not None:
            usable_ids = {gpu.id for gpu in GPUUtils.usable_gpus(snapshot)}
            if not usable_ids and config.gpu_layers:
                logger.info(f"No usable GPU for {name}, deploying on CPU only")
                config = config.model_copy(update={"gpu_layers": 0, "selected_gpu_ids": set()})
            elif not config.selected_gpu_ids <= usable_ids:
                config = config.model_copy(update={"selected_gpu_ids": config.selected_gpu_ids & usable_ids})
        logger.info(f"Deploying {name}: threads={config.threads}, context={config.context_size}, gpu_layers={config.gpu_layers}")
        return self.registry.upsert(name.strip(), config)

    def stop(self, name: str) -> None:
        self.registry.set_status(name, "stopped")

    def start(self, name: str) -> None:
        self.registry.set_status(name, "running")

    async def list(self) -> List[DeploymentRecord]:
        return await self.registry.list_deployments()

import logging
from typing import List, Optional

from ollama_console.entities.model import ModelDetail, ModelSummary
from ollama_console.shared.protocols import GatewayProtocol, ProgressCallback

logger = logging.getLogger(__name__)


class ManageModels:
    """Model listing, pull, delete and details for the models page."""

    def __init__(self, gateway: GatewayProtocol):
        self.gateway = gateway

    async def list(self) -> List[ModelSummary]:
        models = await self.gateway.list_models()
        return sorted(models, key=lambda m: m.name)

    async def pull(self, name: str, on_progress: Optional[ProgressCallback] = None) -> None:
        name = name.strip()
        if not name:
            raise ValueError("Model name must be a non-empty string")
        await self.gateway.pull_model(name, on_progress)

    async def delete(self, name: str) -> None:
        await self.gateway.delete_model(name)

    async def details(self, name: str) -> ModelDetail:
        return await self.gateway.show_model_info(name)

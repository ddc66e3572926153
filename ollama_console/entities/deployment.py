from datetime import datetime, timezone
from typing import Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

DeploymentStatus = Literal["running", "stopped"]


class DeployConfig(BaseModel):
    """User-chosen resource configuration for a deployment."""
    threads: int = Field(4, ge=1)
    context_size: int = Field(4096, gt=0)
    gpu_layers: int = Field(0, ge=0)
    temperature: float = Field(0.7, ge=0, le=2)
    system_prompt: str = ""
    parallel_executions: int = Field(1, ge=1)
    selected_gpu_ids: Set[int] = Field(default_factory=set)


class DeploymentRecord(BaseModel):
    """A tracked deployment. Persisted with camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    status: DeploymentStatus
    threads: int = 0
    context_size: int = Field(0, alias="contextSize")
    gpu_layers: int = Field(0, alias="gpuLayers")
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="startedAt")
    vram_bytes: Optional[int] = Field(None, alias="vramBytes")

from typing import List

from pydantic import BaseModel, Field


class CpuStats(BaseModel):
    """Host CPU load and topology."""
    usage: float = Field(ge=0, le=100)  # Current load in percent, one decimal
    cores: int  # Physical cores
    threads: int  # Logical processors


class MemoryStats(BaseModel):
    """Used and total memory in GiB, two decimals."""
    used: float
    total: float


class GpuSnapshot(BaseModel):
    """One graphics controller. The id is a positional index, not a hardware handle."""
    id: int
    name: str
    usage: float  # Utilization percentage (0-100)
    memory: MemoryStats


class SystemSnapshot(BaseModel):
    """Host telemetry at one point in time, rebuilt on every poll."""
    cpu: CpuStats
    memory: MemoryStats
    gpus: List[GpuSnapshot]

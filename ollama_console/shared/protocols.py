from typing import Awaitable, Callable, Optional, Protocol, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from ollama_console.entities.chat import ChatMessage
    from ollama_console.entities.model import ModelDetail, ModelSummary, RunningModel
    from ollama_console.entities.system import GpuSnapshot, MemoryStats

# Callbacks may be plain functions or coroutine functions
ProgressCallback = Callable[[int], Union[None, Awaitable[None]]]
StatusCallback = Callable[[str], Union[None, Awaitable[None]]]
UpdateCallback = Callable[[str], Union[None, Awaitable[None]]]


class KeyValueStoreProtocol(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class GatewayProtocol(Protocol):
    async def list_models(self) -> list['ModelSummary']: ...

    async def pull_model(self, name: str, on_progress: Optional[ProgressCallback] = None) -> None: ...

    async def delete_model(self, name: str) -> None: ...

    async def show_model_info(self, name: str) -> 'ModelDetail': ...

    async def create_model(self, name: str, template_text: str, on_status: Optional[StatusCallback] = None) -> None: ...

    async def generate(self, model: str, prompt: str) -> str: ...

    async def chat(self, model: str, messages: list['ChatMessage'], on_update: Optional[UpdateCallback] = None) -> 'ChatMessage': ...

    async def list_running(self) -> list['RunningModel']: ...


class CpuSensorProtocol(Protocol):
    def read_usage(self) -> float: ...

    def read_topology(self) -> tuple[Optional[int], Optional[int]]: ...


class MemorySensorProtocol(Protocol):
    def read_memory(self) -> 'MemoryStats': ...


class GpuSensorProtocol(Protocol):
    def read_gpus(self) -> list['GpuSnapshot']: ...

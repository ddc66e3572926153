"""
Shared fixtures for the console and metrics service tests.
"""
import json
from typing import Callable, Dict, List

import httpx
import pytest

from ollama_console.entities.system import CpuStats, GpuSnapshot, MemoryStats, SystemSnapshot
from ollama_console.frameworks_drivers.config import GatewayConfig
from ollama_console.frameworks_drivers.key_value_store import InMemoryKeyValueStore
from ollama_console.frameworks_drivers.ollama_gateway import OllamaGatewayClient
from ollama_console.shared.gpu_utils import NO_GPU_NAME, OFFLINE_GPU_NAME
from ollama_console.shared.typing_reveal import TypingReveal


class RecordingRouter:
    """Routes requests by (method, path) and remembers every request it saw."""

    def __init__(self, routes: Dict[tuple, Callable[[httpx.Request], httpx.Response]]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})
        return handler(request)

    def bodies(self, path: str) -> List[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]


@pytest.fixture
def make_gateway():
    """Build a gateway whose HTTP traffic goes to the given routes, with reveal delays disabled."""
    def factory(routes, server_url: str = "http://ollama.test:11434"):
        router = RecordingRouter(routes)
        gateway = OllamaGatewayClient(
            GatewayConfig(server_url=server_url),
            transport=httpx.MockTransport(router),
            reveal=TypingReveal(delay_range=None),
        )
        return gateway, router
    return factory


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def gpu_snapshot():
    return SystemSnapshot(
        cpu=CpuStats(usage=12.5, cores=8, threads=16),
        memory=MemoryStats(used=10.25, total=31.9),
        gpus=[
            GpuSnapshot(id=0, name="NVIDIA GeForce RTX 4080", usage=40.0, memory=MemoryStats(used=3.5, total=16.0)),
            GpuSnapshot(id=1, name="NVIDIA GeForce RTX 4070", usage=5.0, memory=MemoryStats(used=0.5, total=12.0)),
        ],
    )


@pytest.fixture
def cpu_only_snapshot():
    return SystemSnapshot(
        cpu=CpuStats(usage=3.0, cores=2, threads=4),
        memory=MemoryStats(used=2.0, total=8.0),
        gpus=[GpuSnapshot(id=0, name=NO_GPU_NAME, usage=0.0, memory=MemoryStats(used=0.0, total=0.0))],
    )


@pytest.fixture
def offline_snapshot():
    return SystemSnapshot(
        cpu=CpuStats(usage=0.0, cores=4, threads=8),
        memory=MemoryStats(used=0.0, total=0.0),
        gpus=[GpuSnapshot(id=0, name=OFFLINE_GPU_NAME, usage=0.0, memory=MemoryStats(used=0.0, total=0.0))],
    )


@pytest.fixture
def sample_tags_body():
    return {
        "models": [
            {
                "name": "llama2:7b",
                "modified_at": "2024-05-01T10:00:00.123456789-07:00",
                "size": 3826793677,
                "digest": "78e26419b4469263f75331927a00a0284ef6544c1975b826b15abdaef17bb962",
                "details": {
                    "format": "gguf",
                    "family": "llama",
                    "families": None,
                    "parameter_size": "7B",
                    "quantization_level": "Q4_0",
                },
            },
            {
                "name": "codellama:34b",
                "modified_at": "2024-04-11T08:30:00Z",
                "size": 19052049085,
                "digest": "685be00e1532e01f795e04bc59c67bc292d9b1f80b5136d4fbdebe6830402132",
                "details": {
                    "format": "gguf",
                    "family": "llama",
                    "families": ["llama"],
                    "parameter_size": "34B",
                    "quantization_level": "Q4_0",
                },
            },
        ]
    }

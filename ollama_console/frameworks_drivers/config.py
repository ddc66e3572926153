import json
import os
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from ollama_console.entities.settings import DEFAULT_METRICS_URL, DEFAULT_SERVER_URL


class GatewayConfig(BaseModel):
    """Configuration held by one gateway client instance.

    Attributes:
        server_url: Base URL of the Ollama server, without the /api suffix.
        timeout: Read timeout for non-streaming requests in seconds.
        stream_timeout: Read timeout between chunks of streamed pull/create bodies.
        connect_timeout: Timeout for establishing connections.
    """

    server_url: str = Field(DEFAULT_SERVER_URL, description="Base URL of the Ollama server")
    timeout: float = Field(120.0, gt=0, description="Read timeout for non-streaming requests in seconds")
    stream_timeout: float = Field(600.0, gt=0, description="Read timeout between chunks of streamed bodies")
    connect_timeout: float = Field(10.0, gt=0, description="Timeout for establishing connections")

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("server_url must start with http:// or https://")
        return v

    @property
    def api_base(self) -> str:
        return f"{self.server_url}/api"


class ChatConfig(BaseModel):
    """Configuration for chat presentation.

    Attributes:
        reveal_delay_min: Smallest pause between revealed characters in seconds.
        reveal_delay_max: Largest pause between revealed characters in seconds.
        reveal_enabled: Whether the per-character pauses are applied at all.
    """

    reveal_delay_min: float = Field(0.015, ge=0, description="Smallest pause between revealed characters")
    reveal_delay_max: float = Field(0.035, ge=0, description="Largest pause between revealed characters")
    reveal_enabled: bool = Field(True, description="Whether per-character pauses are applied")

    @property
    def delay_range(self) -> Optional[Tuple[float, float]]:
        if not self.reveal_enabled:
            return None
        return self.reveal_delay_min, max(self.reveal_delay_min, self.reveal_delay_max)


class MetricsServerConfig(BaseModel):
    """Configuration for the metrics companion service.

    Attributes:
        host: Interface the service binds to.
        port: Port the service listens on.
        cpu_sample_interval: Seconds psutil samples CPU load for each snapshot.
        enable_gpu_monitoring: Whether NVML is queried for GPUs.
        cors_origins: Origins allowed to call the service.
    """

    host: str = Field("0.0.0.0", description="Interface the service binds to")
    port: int = Field(3001, ge=1, le=65535, description="Port the service listens on")
    cpu_sample_interval: float = Field(0.1, ge=0, description="Seconds psutil samples CPU load")
    enable_gpu_monitoring: bool = Field(True, description="Whether NVML is queried for GPUs")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Origins allowed to call the service")


class StorageConfig(BaseModel):
    """Configuration for persisted client state.

    Attributes:
        path: JSON file holding settings and deployment records.
    """

    path: str = Field("console_state.json", description="JSON file holding settings and deployment records")


class Config(BaseModel):
    """Main configuration class.

    Attributes:
        ollama: Gateway client configuration.
        metrics_url: Base URL the console uses to reach the metrics service.
        metrics_server: Metrics service configuration.
        chat: Chat presentation settings.
        storage: Persisted state settings.
    """

    ollama: GatewayConfig = Field(default_factory=GatewayConfig)
    metrics_url: str = Field(DEFAULT_METRICS_URL, description="Base URL of the metrics service")
    metrics_server: MetricsServerConfig = Field(default_factory=MetricsServerConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def load(cls, config_path: str = "config.json") -> "Config":
        """Load and validate configuration from JSON file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path) as f:
            data = json.load(f)

        config = cls(**data)
        # Override server URL if set in environment
        if "OLLAMA_CONSOLE_SERVER_URL" in os.environ:
            config.ollama = config.ollama.model_copy(
                update={"server_url": os.environ["OLLAMA_CONSOLE_SERVER_URL"].rstrip("/")},
            )
        return config

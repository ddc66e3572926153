import asyncio
from typing import Dict, Optional

import httpx

from ollama_console.entities.settings import ConsoleSettings
from ollama_console.frameworks_drivers.config import Config, GatewayConfig
from ollama_console.frameworks_drivers.deployment_registry import DeploymentRegistry
from ollama_console.frameworks_drivers.key_value_store import JsonFileKeyValueStore
from ollama_console.frameworks_drivers.metrics_client import MetricsClient
from ollama_console.frameworks_drivers.ollama_gateway import OllamaGatewayClient
from ollama_console.frameworks_drivers.settings_store import METRICS_URL_KEY, SERVER_URL_KEY, SettingsStore
from ollama_console.shared.health_checker import HealthChecker
from ollama_console.shared.logger import Logger
from ollama_console.shared.protocols import KeyValueStoreProtocol
from ollama_console.shared.typing_reveal import TypingReveal

logger = Logger.get(__name__)


class ConsoleServiceFactory:
    """Builds the console's drivers from configuration and stored settings."""

    def __init__(self, config: Config, store: Optional[KeyValueStoreProtocol] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.store = store if store is not None else JsonFileKeyValueStore(config.storage.path)
        self.transport = transport
        self.settings_store = SettingsStore(self.store)

    def load_settings(self) -> ConsoleSettings:
        """Stored settings, with unset URLs taken from the configuration file."""
        settings = self.settings_store.load()
        updates = {}
        if not self.store.get(SERVER_URL_KEY):
            updates["server_url"] = self.config.ollama.server_url
        if not self.store.get(METRICS_URL_KEY):
            updates["metrics_url"] = self.config.metrics_url
        return settings.model_copy(update=updates)

    def create_gateway(self, settings: Optional[ConsoleSettings] = None) -> OllamaGatewayClient:
        settings = settings or self.load_settings()
        gateway_config = GatewayConfig(**{**self.config.ollama.model_dump(), "server_url": settings.server_url})
        reveal = TypingReveal(delay_range=self.config.chat.delay_range)
        return OllamaGatewayClient(gateway_config, transport=self.transport, reveal=reveal)

    def create_metrics_client(self, settings: Optional[ConsoleSettings] = None) -> MetricsClient:
        settings = settings or self.load_settings()
        return MetricsClient(settings.metrics_url, transport=self.transport)

    def create_registry(self, gateway: Optional[OllamaGatewayClient] = None) -> DeploymentRegistry:
        return DeploymentRegistry(self.store, gateway)

    async def check_services(self, settings: Optional[ConsoleSettings] = None) -> Dict[str, bool]:
        """Reachability of the Ollama server and the metrics service."""
        settings = settings or self.load_settings()
        ollama_ok, metrics_ok = await asyncio.gather(
            HealthChecker.check_ollama(settings.server_url),
            HealthChecker.check_metrics_server(settings.metrics_url),
        )
        return {"ollama": ollama_ok, "metrics": metrics_ok}

    def save_settings(self, settings: ConsoleSettings, gateway: OllamaGatewayClient) -> OllamaGatewayClient:
        """
        Persist settings and return a gateway pointed at the saved server URL.

        Raises pydantic ValidationError for an unusable server URL, before anything is stored.
        """
        if settings.server_url.rstrip("/") == gateway.config.server_url:
            updated = gateway
        else:
            updated = gateway.reconfigure(settings.server_url)
            logger.info(f"Server URL changed to {updated.config.server_url}")
        self.settings_store.save(settings)
        return updated

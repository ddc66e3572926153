from unittest.mock import Mock, patch

import httpx
import pytest
import requests
from pydantic import ValidationError

from ollama_console.entities.settings import ConsoleSettings
from ollama_console.frameworks_drivers.config import ChatConfig, Config, GatewayConfig, StorageConfig
from ollama_console.frameworks_drivers.console_service_factory import ConsoleServiceFactory
from ollama_console.frameworks_drivers.key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore


def make_config():
    return Config(
        ollama=GatewayConfig(server_url="http://configured:11434", timeout=15),
        metrics_url="http://configured:3001",
        chat=ChatConfig(reveal_enabled=False),
    )


class TestConsoleServiceFactory:
    def test_configured_urls_fill_unset_settings(self, memory_store):
        settings = ConsoleServiceFactory(make_config(), memory_store).load_settings()

        assert settings.server_url == "http://configured:11434"
        assert settings.metrics_url == "http://configured:3001"

    def test_stored_urls_win(self):
        store = InMemoryKeyValueStore({"serverUrl": "http://stored:11434"})

        settings = ConsoleServiceFactory(make_config(), store).load_settings()

        assert settings.server_url == "http://stored:11434"
        assert settings.metrics_url == "http://configured:3001"

    def test_gateway_uses_settings_and_config(self, memory_store):
        gateway = ConsoleServiceFactory(make_config(), memory_store).create_gateway()

        assert gateway.base_url == "http://configured:11434/api"
        assert gateway.config.timeout == 15
        assert gateway.reveal.delay_range is None

    def test_metrics_client_and_registry(self, memory_store):
        factory = ConsoleServiceFactory(make_config(), memory_store)
        gateway = factory.create_gateway()

        assert factory.create_metrics_client().base_url == "http://configured:3001"
        registry = factory.create_registry(gateway)
        assert registry.store is memory_store
        assert registry.gateway is gateway

    def test_file_store_by_default(self, tmp_path):
        config = make_config().model_copy(update={"storage": StorageConfig(path=str(tmp_path / "state.json"))})

        factory = ConsoleServiceFactory(config)

        assert isinstance(factory.store, JsonFileKeyValueStore)

    def test_save_settings_reconfigures_gateway_on_url_change(self, memory_store):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
        factory = ConsoleServiceFactory(make_config(), memory_store, transport=transport)
        gateway = factory.create_gateway()

        same = factory.save_settings(ConsoleSettings(server_url="http://configured:11434/", dark_mode=True), gateway)
        moved = factory.save_settings(ConsoleSettings(server_url="http://elsewhere:11434"), gateway)

        assert same is gateway
        assert moved is not gateway
        assert moved.base_url == "http://elsewhere:11434/api"
        assert memory_store.get("serverUrl") == "http://elsewhere:11434"

    def test_rejected_server_url_is_not_stored(self, memory_store):
        factory = ConsoleServiceFactory(make_config(), memory_store)
        gateway = factory.create_gateway()
        factory.save_settings(ConsoleSettings(server_url="http://gpu-box:11434"), gateway)

        with pytest.raises(ValidationError):
            factory.save_settings(ConsoleSettings(server_url="localhost:11434", dark_mode=True), gateway)

        assert memory_store.get("serverUrl") == "http://gpu-box:11434"
        assert memory_store.get("darkMode") == "false"
        assert factory.create_gateway().base_url == "http://gpu-box:11434/api"

    def test_empty_stored_urls_fall_back_to_configuration(self):
        store = InMemoryKeyValueStore({"serverUrl": "", "metricsServerUrl": ""})

        settings = ConsoleServiceFactory(make_config(), store).load_settings()

        assert settings.server_url == "http://configured:11434"
        assert settings.metrics_url == "http://configured:3001"

    @pytest.mark.asyncio
    async def test_check_services(self, memory_store):
        factory = ConsoleServiceFactory(make_config(), memory_store)

        with patch("requests.get") as mock_get:
            def answer(url, timeout):
                if url.endswith("/api/tags"):
                    return Mock(status_code=200)
                raise requests.ConnectionError("refused")
            mock_get.side_effect = answer

            status = await factory.check_services()

        assert status == {"ollama": True, "metrics": False}
        urls = sorted(call.args[0] for call in mock_get.call_args_list)
        assert urls == ["http://configured:11434/api/tags", "http://configured:3001/api/health"]

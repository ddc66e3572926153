import httpx
import pytest

from ollama_console.frameworks_drivers.metrics_client import MetricsClient
from ollama_console.shared.errors import GatewayError, NetworkError


def client_for(handler):
    return MetricsClient("http://metrics.test:3001/", transport=httpx.MockTransport(handler))


class TestMetricsClient:
    @pytest.mark.asyncio
    async def test_fetch_snapshot(self, gpu_snapshot):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json=gpu_snapshot.model_dump())

        snapshot = await client_for(handler).fetch_snapshot()

        assert snapshot == gpu_snapshot
        assert seen == ["http://metrics.test:3001/api/system-info"]

    @pytest.mark.asyncio
    async def test_service_error_message_is_kept(self):
        client = client_for(lambda r: httpx.Response(500, json={"error": "Failed to get system information"}))

        with pytest.raises(GatewayError) as exc_info:
            await client.fetch_snapshot()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to get system information"

    @pytest.mark.asyncio
    async def test_unreachable_service(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            await client_for(handler).fetch_snapshot()

    @pytest.mark.asyncio
    async def test_malformed_snapshot(self):
        client = client_for(lambda r: httpx.Response(200, json={"cpu": {"usage": "busy"}}))

        with pytest.raises(NetworkError):
            await client.fetch_snapshot()

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ollama_console.entities.settings import DEFAULT_METRICS_URL
from ollama_console.entities.system import SystemSnapshot
from ollama_console.shared.errors import GatewayError, NetworkError

logger = logging.getLogger(__name__)


class MetricsClient:
    """Reads snapshots from the metrics companion service."""

    def __init__(self, base_url: str = DEFAULT_METRICS_URL, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def fetch_snapshot(self) -> SystemSnapshot:
        url = f"{self.base_url}/api/system-info"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(url)
            except httpx.RequestError as e:
                raise NetworkError(f"Metrics service unreachable at {url}: {e}") from e
        if not response.is_success:
            message = "Failed to get system information"
            try:
                message = response.json().get("error", message)
            except (ValueError, AttributeError):
                pass
            raise GatewayError(message, status_code=response.status_code)
        try:
            return SystemSnapshot.model_validate_json(response.content)
        except ValidationError as e:
            raise NetworkError(f"Malformed snapshot from {url}: {e}") from e

import asyncio
from typing import Optional

import requests

from ollama_console.shared.logger import Logger

logger = Logger.get(__name__)


class HealthChecker:
    """
    Reachability probes for the two services the console talks to.
    """

    @staticmethod
    async def check_http_endpoint(url: str, timeout: float = 5.0) -> bool:
        """True when a GET on url answers 200 within timeout seconds."""
        try:
            response = await asyncio.to_thread(requests.get, url, timeout=timeout)
        except requests.RequestException as e:
            logger.debug(f"No answer from {url}: {e}")
            return False
        if response.status_code != 200:
            logger.warning(f"{url} answered {response.status_code}")
            return False
        return True

    @staticmethod
    async def check_metrics_server(base_url: str, timeout: float = 5.0) -> bool:
        """True when the metrics service answers its health route with status "ok"."""
        url = f"{base_url.rstrip('/')}/api/health"
        try:
            response = await asyncio.to_thread(requests.get, url, timeout=timeout)
            if response.status_code != 200:
                logger.warning(f"Metrics server unhealthy at {url}: status {response.status_code}")
                return False
            body = response.json()
            return isinstance(body, dict) and body.get("status") == "ok"
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Metrics server unreachable at {url}: {e}")
            return False

    @staticmethod
    async def check_ollama(server_url: str, timeout: Optional[float] = 5.0) -> bool:
        """True when the Ollama server answers its model listing."""
        return await HealthChecker.check_http_endpoint(f"{server_url.rstrip('/')}/api/tags", timeout=timeout)

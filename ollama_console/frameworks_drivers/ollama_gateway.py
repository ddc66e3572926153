import json
import logging
import math
import time
from typing import Any, Awaitable, Callable, List, Optional

import httpx
from pydantic import ValidationError

from ollama_console.entities.chat import ChatMessage
from ollama_console.entities.model import ModelDetail, ModelSummary, RunningModel
from ollama_console.frameworks_drivers.chat_response import decode_chat_body, parse_body
from ollama_console.frameworks_drivers.config import GatewayConfig
from ollama_console.shared.errors import GatewayError, NetworkError
from ollama_console.shared.ndjson import NDJSONDecoder
from ollama_console.shared.protocols import GatewayProtocol, ProgressCallback, StatusCallback, UpdateCallback
from ollama_console.shared.typing_reveal import TypingReveal, invoke_callback

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response received from Ollama generate endpoint."
APOLOGY_TEXT = "Sorry, there was an error connecting to Ollama. Please check if the Ollama server is running correctly."


class OllamaGatewayClient(GatewayProtocol):
    """Typed async client over the Ollama REST API."""

    def __init__(self, config: Optional[GatewayConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 reveal: Optional[TypingReveal] = None):
        self.config = config or GatewayConfig()
        self.transport = transport
        self.reveal = reveal or TypingReveal()

    @property
    def base_url(self) -> str:
        return self.config.api_base

    def reconfigure(self, server_url: str) -> "OllamaGatewayClient":
        """Return a client for another server, keeping every other setting."""
        config = GatewayConfig(**{**self.config.model_dump(), "server_url": server_url})
        logger.info(f"Gateway reconfigured: {self.config.server_url} -> {config.server_url}")
        return OllamaGatewayClient(config, transport=self.transport, reveal=self.reveal)

    def _client(self, read_timeout: float) -> httpx.AsyncClient:
        timeout = httpx.Timeout(read=read_timeout, connect=self.config.connect_timeout, write=10.0, pool=10.0)
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        message = response.reason_phrase or "request failed"
        try:
            body = response.json()
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
        except ValueError:
            if response.text:
                message = response.text[:200]
        raise GatewayError(message, status_code=response.status_code)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Malformed response body from {response.request.url}: {e}") from e

    async def _send(self, method: str, path: str, payload: Optional[dict] = None) -> httpx.Response:
        start_time = time.time()
        async with self._client(self.config.timeout) as client:
            try:
                response = await client.request(method, path, json=payload)
            except httpx.TimeoutException as e:
                elapsed = time.time() - start_time
                logger.error(f"Timeout after {elapsed:.2f}s on {method} {path}: {e}")
                raise NetworkError(f"Request to Ollama timed out: {e}") from e
            except httpx.RequestError as e:
                logger.error(f"Could not reach Ollama for {method} {path}: {e}")
                raise NetworkError(f"Could not reach Ollama at {self.config.server_url}: {e}") from e
        elapsed = time.time() - start_time
        logger.debug(f"{method} {path} -> {response.status_code} in {elapsed:.2f}s")
        self._raise_for_status(response)
        return response

    async def _stream(self, path: str, payload: dict, handle: Callable[[dict], Awaitable[None]]) -> None:
        """POST and hand every decoded NDJSON object of the body to handle, in arrival order."""
        decoder = NDJSONDecoder()
        received = False
        async with self._client(self.config.stream_timeout) as client:
            try:
                async with client.stream("POST", path, json=payload) as response:
                    if not response.is_success:
                        await response.aread()
                        self._raise_for_status(response)
                    async for line in response.aiter_lines():
                        received = True
                        obj = decoder.decode(line)
                        if obj is not None:
                            await handle(obj)
            except httpx.RequestError as e:
                logger.error(f"Stream from {path} failed: {e}")
                raise NetworkError(f"Stream from Ollama failed: {e}") from e
        if not received:
            raise NetworkError(f"Ollama returned no body for {path}")
        if decoder.skipped:
            logger.info(f"Skipped {decoder.skipped} malformed line(s) from {path}")

    @staticmethod
    def _stream_error(obj: dict) -> None:
        if obj.get("error"):
            raise GatewayError(str(obj["error"]))

    @staticmethod
    def progress_percent(obj: dict) -> Optional[int]:
        """Percentage carried by one pull status line, or None if it carries none."""
        total, completed = obj.get("total"), obj.get("completed")
        for value in (total, completed):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
        if total <= 0:
            return None
        # Half-up rounding, not banker's rounding
        percent = math.floor(completed / total * 100 + 0.5)
        return max(0, min(100, percent))

    async def list_models(self) -> List[ModelSummary]:
        response = await self._send("GET", "/tags")
        body = self._json(response)
        models = body.get("models") if isinstance(body, dict) else None
        try:
            return [ModelSummary.model_validate(m) for m in models or []]
        except ValidationError as e:
            raise NetworkError(f"Unexpected model listing from Ollama: {e}") from e

    async def list_running(self) -> List[RunningModel]:
        response = await self._send("GET", "/ps")
        body = self._json(response)
        models = body.get("models") if isinstance(body, dict) else None
        try:
            return [RunningModel.model_validate(m) for m in models or []]
        except ValidationError as e:
            raise NetworkError(f"Unexpected running model listing from Ollama: {e}") from e

    async def pull_model(self, name: str, on_progress: Optional[ProgressCallback] = None) -> None:
        logger.info(f"Pulling model {name}")
        last_percent = -1

        async def handle(obj: dict) -> None:
            nonlocal last_percent
            self._stream_error(obj)
            if obj.get("status") == "success":
                percent = 100
            else:
                percent = self.progress_percent(obj)
                # Each layer restarts its own total. Progress holds at the highest value
                # reported so far, so a later layer shows nothing until it reaches it.
                if percent is None or percent < last_percent:
                    return
            last_percent = percent
            if on_progress:
                await invoke_callback(on_progress, percent)

        await self._stream("/pull", {"name": name}, handle)
        logger.info(f"Pull of {name} finished at {max(last_percent, 0)}%")

    async def delete_model(self, name: str) -> None:
        logger.info(f"Deleting model {name}")
        await self._send("DELETE", "/delete", {"name": name})

    async def show_model_info(self, name: str) -> ModelDetail:
        response = await self._send("POST", "/show", {"name": name})
        body = self._json(response)
        if not isinstance(body, dict):
            raise NetworkError(f"Unexpected details body for {name}")
        return ModelDetail.model_validate(body)

    async def create_model(self, name: str, template_text: str, on_status: Optional[StatusCallback] = None) -> None:
        logger.info(f"Creating model {name}")

        async def handle(obj: dict) -> None:
            self._stream_error(obj)
            status = obj.get("status")
            if isinstance(status, str) and on_status:
                await invoke_callback(on_status, status)

        await self._stream("/create", {"name": name, "modelfile": template_text}, handle)

    async def generate(self, model: str, prompt: str) -> str:
        response = await self._send("POST", "/generate", {"model": model, "prompt": prompt, "stream": False})
        body = self._json(response)
        if isinstance(body, dict) and body.get("response"):
            return str(body["response"])
        return NO_RESPONSE_TEXT

    async def _chat_text(self, model: str, messages: List[ChatMessage]) -> str:
        payload = {"model": model, "messages": [m.model_dump() for m in messages], "stream": False}
        response = await self._send("POST", "/chat", payload)
        decoded = decode_chat_body(parse_body(response.content))
        logger.debug(f"Chat body from {model} decoded as {decoded.shape}")
        return decoded.text

    async def _fallback_text(self, model: str, messages: List[ChatMessage]) -> str:
        prompt = next((m.content for m in reversed(messages) if m.role == "user"), "")
        try:
            return await self.generate(model, prompt)
        except Exception as e:
            logger.error(f"Generate fallback also failed for {model}: {e}")
            return APOLOGY_TEXT

    async def chat(self, model: str, messages: List[ChatMessage],
                   on_update: Optional[UpdateCallback] = None) -> ChatMessage:
        """
        Send a conversation and resolve the assistant reply. Never raises.

        With on_update, the reply is revealed character by character; fallback
        texts are delivered in a single update.
        """
        try:
            text = await self._chat_text(model, messages)
        except Exception as e:
            logger.warning(f"Chat endpoint failed for {model}, trying generate: {e}")
            text = await self._fallback_text(model, messages)
            if on_update:
                await self._deliver(on_update, text)
            return ChatMessage(role="assistant", content=text)

        if on_update:
            try:
                await self.reveal.reveal(text, on_update)
            except Exception:
                logger.exception(f"Update callback failed while revealing reply from {model}")
        return ChatMessage(role="assistant", content=text)

    @staticmethod
    async def _deliver(on_update: UpdateCallback, text: str) -> None:
        try:
            await invoke_callback(on_update, text)
        except Exception:
            logger.exception("Update callback failed while delivering fallback reply")

    async def test_connection(self) -> str:
        """Raw model listing, pretty-printed, for the API endpoints page."""
        response = await self._send("GET", "/tags")
        return json.dumps(self._json(response), indent=2)

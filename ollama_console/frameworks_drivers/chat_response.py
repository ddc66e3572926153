"""
Decoding of chat endpoint bodies.

The chat endpoint has been seen answering in several shapes. They are tried in a
fixed order and the first match wins:

    message   {"message": {"content": "..."}}   chat completion
    response  {"response": "..."}               generate-style completion
    text      "..."                             the body itself is the text
    raw       anything else                     compact JSON of the whole body

An empty body (null, empty string) decodes to a fixed explanatory text.
"""
import json
from dataclasses import dataclass
from typing import Any, Literal

ChatBodyShape = Literal["message", "response", "text", "raw", "empty"]

UNEXPECTED_FORMAT_TEXT = (
    "Received an unexpected response format from Ollama. Please check your server configuration."
)


@dataclass(frozen=True)
class DecodedChatBody:
    shape: ChatBodyShape
    text: str


def _is_empty(body: Any) -> bool:
    return body is None or (isinstance(body, (str, int, float, bool)) and not body)


def _as_message(body: Any):
    if isinstance(body, dict) and isinstance(body.get("message"), dict):
        content = body["message"].get("content")
        if content:
            return DecodedChatBody("message", str(content))
    return None


def _as_response(body: Any):
    if isinstance(body, dict) and body.get("response"):
        return DecodedChatBody("response", str(body["response"]))
    return None


def _as_text(body: Any):
    if isinstance(body, str):
        return DecodedChatBody("text", body)
    return None


_DECODERS = (_as_message, _as_response, _as_text)


def decode_chat_body(body: Any) -> DecodedChatBody:
    """Resolve the reply text of a chat body that was already parsed from JSON (or left as text)."""
    if _is_empty(body):
        return DecodedChatBody("empty", UNEXPECTED_FORMAT_TEXT)
    for decoder in _DECODERS:
        decoded = decoder(body)
        if decoded is not None:
            return decoded
    return DecodedChatBody("raw", json.dumps(body, separators=(",", ":"), ensure_ascii=False))


def parse_body(content: bytes) -> Any:
    """JSON-decode a response body, falling back to its text when it is not JSON."""
    text = content.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text

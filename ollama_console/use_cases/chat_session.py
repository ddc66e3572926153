import logging
from typing import List, Optional

from ollama_console.entities.chat import ChatMessage
from ollama_console.shared.protocols import GatewayProtocol, UpdateCallback
from ollama_console.shared.typing_reveal import invoke_callback

logger = logging.getLogger(__name__)


class ChatSession:
    """
    One conversation with one model.

    The assistant reply is appended as an empty message first and filled in as
    the reveal progresses, so a view rendering `messages` sees the typing.
    """

    def __init__(self, gateway: GatewayProtocol, model: str, system_prompt: Optional[str] = None):
        self.gateway = gateway
        self.model = model
        self.messages: List[ChatMessage] = []
        if system_prompt:
            self.messages.append(ChatMessage(role="system", content=system_prompt))

    async def send(self, content: str, on_update: Optional[UpdateCallback] = None) -> ChatMessage:
        if not content.strip():
            raise ValueError("Message content must not be empty")
        self.messages.append(ChatMessage(role="user", content=content.strip()))
        history = list(self.messages)
        reply = ChatMessage(role="assistant", content="")
        self.messages.append(reply)

        async def update(partial: str) -> None:
            reply.content = partial
            if on_update:
                await invoke_callback(on_update, partial)

        result = await self.gateway.chat(self.model, history, update)
        reply.content = result.content
        return reply

    def clear(self) -> None:
        self.messages = [m for m in self.messages if m.role == "system"]

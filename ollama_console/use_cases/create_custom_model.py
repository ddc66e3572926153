import logging
from typing import List, Optional

from ollama_console.shared.protocols import GatewayProtocol, StatusCallback
from ollama_console.shared.typing_reveal import invoke_callback

logger = logging.getLogger(__name__)


def build_modelfile(base_model: str, system_prompt: str = "", temperature: float = 0.7, context_size: int = 4096) -> str:
    """Modelfile deriving a custom model from base_model."""
    content = f"FROM {base_model}\n"
    if system_prompt:
        content += f'SYSTEM """{system_prompt}"""\n'
    content += f"PARAMETER temperature {temperature}\n"
    content += f"PARAMETER num_ctx {context_size}\n"
    return content


class CreateCustomModel:
    def __init__(self, gateway: GatewayProtocol):
        self.gateway = gateway

    async def execute(self, name: str, base_model: str, system_prompt: str = "", temperature: float = 0.7,
                      context_size: int = 4096, on_status: Optional[StatusCallback] = None) -> List[str]:
        """Create the model and return the status lines the server reported."""
        if not name or not base_model:
            raise ValueError("Name and base model are required")
        if not 0 <= temperature <= 2:
            raise ValueError("Temperature must be between 0 and 2")

        log: List[str] = []

        async def record(status: str) -> None:
            log.append(status)
            if on_status:
                await invoke_callback(on_status, status)

        modelfile = build_modelfile(base_model, system_prompt, temperature, context_size)
        await self.gateway.create_model(name, modelfile, record)
        logger.info(f"Created model {name} from {base_model}")
        return log

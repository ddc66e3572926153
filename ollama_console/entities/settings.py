from pydantic import BaseModel, Field

DEFAULT_SERVER_URL = "http://localhost:11434"
DEFAULT_METRICS_URL = "http://localhost:3001"


class ConsoleSettings(BaseModel):
    """User preferences kept in client storage.

    Attributes:
        server_url: Base URL of the Ollama server.
        metrics_url: Base URL of the metrics service.
        dark_mode: Whether the dark theme is selected.
        auto_refresh: Whether dashboards poll automatically.
        refresh_interval: Poll interval in seconds.
    """

    server_url: str = Field(DEFAULT_SERVER_URL, description="Base URL of the Ollama server")
    metrics_url: str = Field(DEFAULT_METRICS_URL, description="Base URL of the metrics service")
    dark_mode: bool = Field(False, description="Whether the dark theme is selected")
    auto_refresh: bool = Field(True, description="Whether dashboards poll automatically")
    refresh_interval: int = Field(5, gt=0, description="Poll interval in seconds")

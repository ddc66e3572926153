"""
Error taxonomy shared by the gateway client, the metrics collector and the registry.
"""
from typing import Optional


class ConsoleError(Exception):
    """Base class for every error raised by the console."""


class SensorReadError(ConsoleError):
    """A host sensor (CPU, memory or GPU) could not be read."""


class NetworkError(ConsoleError):
    """The request could not be sent, or the response was unusable at the transport level."""


class GatewayError(ConsoleError):
    """The inference server answered with a non-success status or an in-stream error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class StreamParseError(ConsoleError):
    """One line of a newline-delimited JSON body was not valid JSON."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"Could not decode stream line {line[:80]!r}: {reason}")
        self.line = line
        self.reason = reason


class StorageError(ConsoleError):
    """Persisted client state could not be read or written."""

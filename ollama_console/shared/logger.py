import logging
import os


class Logger:
    """Utility class for console-wide logging configuration."""

    @staticmethod
    def get(name: str) -> logging.Logger:
        """
        Get a logger for the console and metrics service.
        Configures the root logger on first use, honouring OLLAMA_CONSOLE_LOG_LEVEL.
        """
        if not logging.getLogger().hasHandlers():
            level = os.environ.get("OLLAMA_CONSOLE_LOG_LEVEL", "INFO").upper()
            logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        return logging.getLogger(name)

import logging

from ollama_console.entities.settings import ConsoleSettings
from ollama_console.shared.protocols import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

SERVER_URL_KEY = "serverUrl"
METRICS_URL_KEY = "metricsServerUrl"
DARK_MODE_KEY = "darkMode"
AUTO_REFRESH_KEY = "autoRefresh"
REFRESH_INTERVAL_KEY = "refreshInterval"


class SettingsStore:
    """Reads and writes console preferences as string primitives."""

    def __init__(self, store: KeyValueStoreProtocol):
        self.store = store

    def load(self) -> ConsoleSettings:
        defaults = ConsoleSettings()
        interval = self.store.get(REFRESH_INTERVAL_KEY)
        try:
            refresh_interval = int(interval) if interval else defaults.refresh_interval
        except ValueError:
            logger.warning(f"Ignoring invalid refresh interval {interval!r}")
            refresh_interval = defaults.refresh_interval
        return ConsoleSettings(
            server_url=self.store.get(SERVER_URL_KEY) or defaults.server_url,
            metrics_url=self.store.get(METRICS_URL_KEY) or defaults.metrics_url,
            dark_mode=self.store.get(DARK_MODE_KEY) == "true",
            # Enabled unless explicitly switched off
            auto_refresh=self.store.get(AUTO_REFRESH_KEY) != "false",
            refresh_interval=max(1, refresh_interval),
        )

    def save(self, settings: ConsoleSettings) -> None:
        self.store.set(SERVER_URL_KEY, settings.server_url)
        self.store.set(METRICS_URL_KEY, settings.metrics_url)
        self.store.set(DARK_MODE_KEY, str(settings.dark_mode).lower())
        self.store.set(AUTO_REFRESH_KEY, str(settings.auto_refresh).lower())
        self.store.set(REFRESH_INTERVAL_KEY, str(settings.refresh_interval))
        logger.info("Settings saved")

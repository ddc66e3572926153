import os

import uvicorn

from ollama_console.frameworks_drivers.config import Config
from ollama_console.frameworks_drivers.gpu_monitor import GPUMonitor
from ollama_console.frameworks_drivers.host_sensors import CpuSensor, MemorySensor
from ollama_console.interface_adapters.api import API
from ollama_console.interface_adapters.health_controller import HealthController
from ollama_console.interface_adapters.system_info_controller import SystemInfoController
from ollama_console.shared.logger import Logger
from ollama_console.use_cases.get_health import GetHealth
from ollama_console.use_cases.metrics_collector import MetricsCollector

if __name__ == "__main__":
    logger = Logger.get(__name__)

    gpu_monitor = None
    try:
        config_path = os.environ.get("OLLAMA_CONSOLE_CONFIG", "config.json")
        config = Config.load(config_path) if os.path.exists(config_path) else Config()
        server_config = config.metrics_server

        # Override port if set in environment
        if "PORT" in os.environ:
            server_config.port = int(os.environ["PORT"])

        # Instantiate sensors
        gpu_monitor = GPUMonitor(server_config)
        metrics_collector = MetricsCollector(
            CpuSensor(server_config.cpu_sample_interval),
            MemorySensor(),
            gpu_monitor,
        )

        # Instantiate controllers
        health_controller = HealthController(GetHealth())
        system_info_controller = SystemInfoController(metrics_collector)

        api = API(health_controller, system_info_controller, server_config.cors_origins)

        logger.info(f"Starting metrics server on port {server_config.port}...")
        uvicorn.run(api.app, host=server_config.host, port=server_config.port)
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
    finally:
        if gpu_monitor is not None:
            gpu_monitor.shutdown()

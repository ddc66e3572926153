from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ollama_console.interface_adapters.health_controller import HealthController
from ollama_console.interface_adapters.system_info_controller import SystemInfoController


class API:
    def __init__(self, health_controller: HealthController, system_info_controller: SystemInfoController,
                 cors_origins: list[str] | None = None):
        self.health_controller = health_controller
        self.system_info_controller = system_info_controller
        self.app = FastAPI(title="Ollama Console Metrics", version="0.1.0")
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins or ["*"],
            allow_methods=["GET"],
            allow_headers=["*"],
        )

        self._register_routes()

    def _register_routes(self):
        def health_handler():
            return self.health_controller.health()

        async def system_info_handler():
            return await self.system_info_controller.system_info()

        self.app.get("/api/health")(health_handler)
        self.app.get("/api/system-info")(system_info_handler)

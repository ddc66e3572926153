import logging

from fastapi.responses import JSONResponse

from ollama_console.shared.error_utils import ErrorUtils
from ollama_console.use_cases.metrics_collector import MetricsCollector

logger = logging.getLogger(__name__)

SYSTEM_INFO_ERROR = "Failed to get system information"


class SystemInfoController:
    def __init__(self, metrics_collector: MetricsCollector):
        self.metrics_collector = metrics_collector

    async def system_info(self):
        try:
            snapshot = await self.metrics_collector.get_snapshot()
        except Exception as e:
            logger.error(f"Error getting system information: {ErrorUtils.describe(e)}")
            return JSONResponse(status_code=500, content=ErrorUtils.format_error_response(SYSTEM_INFO_ERROR))
        return snapshot.model_dump()

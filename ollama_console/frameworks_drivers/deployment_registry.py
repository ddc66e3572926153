import json
import logging
import threading
import time
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ollama_console.entities.deployment import DeployConfig, DeploymentRecord, DeploymentStatus
from ollama_console.shared.errors import StorageError
from ollama_console.shared.protocols import GatewayProtocol, KeyValueStoreProtocol

logger = logging.getLogger(__name__)

DEPLOYMENTS_KEY = "deployedModels"

_records_adapter = TypeAdapter(List[DeploymentRecord])


class DeploymentRegistry:
    """
    Deployed model configurations, persisted as one JSON array in a key-value store.

    When a gateway is available, listing reports the server's running models
    instead of the persisted records. The two sources are never merged.
    """

    def __init__(self, store: KeyValueStoreProtocol, gateway: Optional[GatewayProtocol] = None):
        self.store = store
        self.gateway = gateway
        self._lock = threading.Lock()
        self._last_id = 0

    def _load(self) -> List[DeploymentRecord]:
        raw = self.store.get(DEPLOYMENTS_KEY)
        if not raw:
            return []
        try:
            return _records_adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Persisted deployments are unreadable: {e}") from e

    def _save(self, records: List[DeploymentRecord]) -> None:
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
        self.store.set(DEPLOYMENTS_KEY, json.dumps(payload))

    def _new_id(self) -> str:
        # Time-derived, strictly increasing within this process
        self._last_id = max(time.time_ns(), self._last_id + 1)
        return str(self._last_id)

    def persisted(self) -> List[DeploymentRecord]:
        with self._lock:
            return self._load()

    async def list_deployments(self) -> List[DeploymentRecord]:
        if self.gateway is not None:
            try:
                running = await self.gateway.list_running()
            except Exception as e:
                logger.warning(f"Live deployment query failed, using persisted records: {e}")
            else:
                now = datetime.now(timezone.utc)
                # The live endpoint exposes no thread/context/layer settings
                return [
                    DeploymentRecord(
                        id=model.digest or model.name,
                        name=model.name,
                        status="running",
                        threads=0,
                        context_size=0,
                        gpu_layers=0,
                        started_at=now,
                        vram_bytes=model.size_vram,
                    )
                    for model in running
                ]
        return self.persisted()

    def upsert(self, name: str, config: DeployConfig) -> DeploymentRecord:
        with self._lock:
            records = self._load()
            index = next((i for i, r in enumerate(records) if r.name == name), None)
            record = DeploymentRecord(
                id=records[index].id if index is not None else self._new_id(),
                name=name,
                status="running",
                threads=config.threads,
                context_size=config.context_size,
                gpu_layers=config.gpu_layers,
                started_at=datetime.now(timezone.utc),
            )
            if index is not None:
                records[index] = record
            else:
                records.append(record)
            self._save(records)
        logger.info(f"Deployment of {name} recorded with id {record.id}")
        return record

    def set_status(self, name: str, status: DeploymentStatus) -> None:
        with self._lock:
            records = self._load()
            updated = [r.model_copy(update={"status": status}) if r.name == name else r for r in records]
            self._save(updated)
        logger.info(f"Deployment {name} marked {status}")

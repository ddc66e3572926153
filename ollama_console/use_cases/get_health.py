from typing import Any


class GetHealth:
    def execute(self) -> dict[str, Any]:
        return {"status": "ok"}

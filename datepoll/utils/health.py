from __future__ import annotations

from typing import Any

from datepoll.db.gateway import StorageGateway


def _database_ready(gateway: StorageGateway) -> str:
    try:
        return "ready" if gateway.ping() else "error: no response"
    except Exception as exc:
        return f"error: {exc}"


def readiness(gateway: StorageGateway | None) -> dict[str, Any]:
    dependencies: dict[str, str] = {}
    if gateway is None:
        dependencies["database"] = "error: unavailable"
    else:
        dependencies["database"] = _database_ready(gateway)
    ok = dependencies["database"] == "ready"
    return {"ok": ok, "dependencies": dependencies}

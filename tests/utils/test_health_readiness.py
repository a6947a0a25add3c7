from __future__ import annotations

from datepoll.utils.health import readiness


class _BrokenGateway:
    def ping(self) -> bool:
        raise RuntimeError("database unavailable")


def test_readiness_ok_with_sqlite(gateway):
    status = readiness(gateway)
    assert status["ok"] is True
    assert status["dependencies"]["database"] == "ready"


def test_readiness_fails_without_gateway():
    status = readiness(None)
    assert status["ok"] is False
    assert "error" in status["dependencies"]["database"]


def test_readiness_fails_when_ping_raises():
    status = readiness(_BrokenGateway())
    assert status["ok"] is False
    assert "database unavailable" in status["dependencies"]["database"]

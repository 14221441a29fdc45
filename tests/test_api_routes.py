"""Tests for API endpoints."""

from unittest.mock import AsyncMock, patch

from wifiviewer.scanner.base import ProbeAttempt, WifiRecord
from wifiviewer.scanner.diagnostics import ScanSuccess, build_diagnostic


def _success() -> ScanSuccess:
    return ScanSuccess(
        records=[
            WifiRecord("HomeNet", "00:11:22:33:44:55", "72"),
            WifiRecord("", "AA:BB:CC:DD:EE:FF", "15"),
        ],
        adapter_name="nmcli",
    )


class TestHealthEndpoint:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_security_headers(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"


class TestScanEndpoint:
    def test_records_returned(self, client):
        discover = AsyncMock(return_value=_success())
        with patch("wifiviewer.api.routes.discover", new=discover):
            resp = client.post("/api/bssids", json={"building": "A", "room": "101"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["adapter"] == "nmcli"
        assert data["building"] == "A"
        assert data["room"] == "101"
        assert data["records"] == [
            {"ssid": "HomeNet", "bssid": "00:11:22:33:44:55", "signal": "72"},
            {"ssid": "", "bssid": "AA:BB:CC:DD:EE:FF", "signal": "15"},
        ]
        assert data["diagnostic"] is None

    def test_context_forwarded(self, client):
        discover = AsyncMock(return_value=_success())
        with patch("wifiviewer.api.routes.discover", new=discover):
            client.post("/api/bssids", json={"building": "C", "room": "202"})

        assert discover.await_args.args[0] == ("C", "202")

    def test_diagnostic_returned_as_data(self, client):
        attempts = [
            ProbeAttempt(adapter_name="nmcli", raw_error="nmcli: command not found"),
            ProbeAttempt.not_applicable("netsh", "linux"),
        ]
        diagnostic = build_diagnostic(attempts, tools=["nmcli"])
        with patch("wifiviewer.api.routes.discover", new=AsyncMock(return_value=diagnostic)):
            resp = client.post("/api/bssids", json={"building": "B", "room": "102"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "no_data"
        assert data["records"] == []
        diag = data["diagnostic"]
        assert [e["adapter_name"] for e in diag["entries"]] == ["nmcli", "netsh"]
        assert diag["entries"][1]["applicable"] is False
        assert diag["hints"][0] == "Required tools: nmcli"
        assert diag["lines"][0] == "=== DEBUG INFO ==="

    def test_missing_fields_rejected(self, client):
        resp = client.post("/api/bssids", json={"building": "A"})
        assert resp.status_code == 422

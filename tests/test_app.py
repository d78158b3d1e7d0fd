from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from archivist.core.categories.api.v1 import routes_categories
from archivist.main import app

pytestmark = pytest.mark.integration


class TestAppSurface:
    def test_health(self, client):
        resp = client.get("/api/v1/health")
        body = resp.json()
        assert resp.status_code == 200
        assert body["database"] is True
        assert body["redis"] is True

    def test_legends_catalogue(self, client):
        resp = client.get("/api/v1/legends")
        result = resp.json()["result"]

        assert resp.status_code == 200
        assert result["year"] == 2026
        assert [l["value"] for l in result["legends"]] == [
            "CORE_MEMORY",
            "GOOD_DAY",
            "NEUTRAL",
            "BAD_DAY",
            "NIGHTMARE",
        ]
        assert {"label", "color", "textColor", "valence"} <= set(result["legends"][0])
        assert [c["value"] for c in result["categories"]] == ["WORK", "PERSONAL", "LEARNING"]

    def test_unexpected_error_is_generic_500(self, client, alice_headers, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("database password is hunter2")

        monkeypatch.setattr(routes_categories, "list_categories", explode)

        with TestClient(app, raise_server_exceptions=False) as quiet_client:
            resp = quiet_client.get("/api/v1/categories", headers=alice_headers)

        assert resp.status_code == 500
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "hunter2" not in resp.text

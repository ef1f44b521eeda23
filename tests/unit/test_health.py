"""
Application factory tests: startup migrations, health check and routing.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from orienteering.api.deps import get_rules, get_settings


@pytest.fixture
def client(
    tmp_path: Path, project_root: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[TestClient]:
    monkeypatch.chdir(project_root)
    monkeypatch.setenv("ORIENTEERING_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ORIENTEERING_RULES_PATH", str(project_root / "rules.yaml"))
    get_settings.cache_clear()
    get_rules.cache_clear()

    from orienteering.api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

    get_settings.cache_clear()
    get_rules.cache_clear()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "api"}


def test_startup_creates_database(client: TestClient, tmp_path: Path) -> None:
    assert (tmp_path / "data" / "orienteering.db").exists()


def test_router_mounted_under_api(client: TestClient) -> None:
    response = client.get("/api/events/cup/start-lists/long/draft")

    assert response.status_code == 404
    assert response.json()["detail"]["errors"][0]["code"] == "start_list_not_found"

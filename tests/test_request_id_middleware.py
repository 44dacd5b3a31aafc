from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_responses_carry_request_id(client: TestClient):
    resp = client.post("/api/sightings", json={}, headers={"X-Request-ID": "req-400"})

    assert resp.status_code == 400
    assert resp.headers.get("X-Request-ID") == "req-400"

from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from savemetoilet.api.app import create_app
from savemetoilet.api.dependencies import get_collector

from seoul_fakes import FakeSeoulUpstream

PREFIX = "/api/v1/test"


class ExplodingCollector:
    async def fetch_all(self):
        raise RuntimeError("collector bug")


def build_client(collector) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_collector] = lambda: collector
    return TestClient(app)


def test_health_reports_up() -> None:
    client = TestClient(create_app())
    response = client.get(f"{PREFIX}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "UP"
    assert body["version"] == "1.0.0"
    assert isinstance(body["timestamp"], int)


def test_connection_reports_probe_result() -> None:
    ok = build_client(FakeSeoulUpstream(total_count=3).collector()).get(f"{PREFIX}/connection")
    failed = build_client(FakeSeoulUpstream(total_count=3, code="ERROR-500").collector()).get(f"{PREFIX}/connection")

    assert ok.status_code == 200
    assert ok.json()["success"] is True
    assert failed.status_code == 200
    assert failed.json()["success"] is False
    assert "timestamp" in failed.json()


def test_sample_returns_first_records_with_upstream_field_names() -> None:
    client = build_client(FakeSeoulUpstream(total_count=25).collector())
    response = client.get(f"{PREFIX}/toilets/sample")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total_count"] == 25
    assert body["sample_count"] == 10
    assert body["complete"] is True
    assert body["toilets"][0]["POI_ID"] == "poi-1"
    assert body["toilets"][0]["FNAME"] == "Toilet 1"
    assert set(body["toilets"][0]) == {
        "POI_ID",
        "FNAME",
        "ANAME",
        "CNAME",
        "X_WGS84",
        "Y_WGS84",
        "INSERTDATE",
        "UPDATEDATE",
    }


def test_sample_limit_is_clamped() -> None:
    client = build_client(FakeSeoulUpstream(total_count=150).collector())

    too_large = client.get(f"{PREFIX}/toilets/sample", params={"limit": 500}).json()
    negative = client.get(f"{PREFIX}/toilets/sample", params={"limit": -5}).json()

    assert too_large["sample_count"] == 100
    assert negative["sample_count"] == 0
    assert negative["total_count"] == 150


def test_count_returns_assembled_record_count() -> None:
    client = build_client(FakeSeoulUpstream(total_count=2500).collector())
    response = client.get(f"{PREFIX}/toilets/count")

    assert response.status_code == 200
    assert response.json()["total_count"] == 2500
    assert response.json()["complete"] is True


def test_count_flags_partial_dataset() -> None:
    upstream = FakeSeoulUpstream(total_count=2500)
    upstream.script(2001, 2500, *[httpx.Response(status_code=503) for _ in range(3)])
    response = build_client(upstream.collector()).get(f"{PREFIX}/toilets/count")

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["total_count"] == 2000
    assert body["complete"] is False
    assert "partial" in body["message"]


def test_unexpected_collector_failure_renders_500() -> None:
    client = build_client(ExplodingCollector())

    sample = client.get(f"{PREFIX}/toilets/sample")
    count = client.get(f"{PREFIX}/toilets/count")

    assert sample.status_code == 500
    assert sample.json()["success"] is False
    assert "collector bug" in sample.json()["message"]
    assert count.status_code == 500
    assert count.json()["success"] is False


def test_responses_allow_any_origin() -> None:
    client = TestClient(create_app())
    response = client.get(f"{PREFIX}/health", headers={"Origin": "http://localhost:5173"})
    preflight = client.options(
        f"{PREFIX}/toilets/count",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "GET"},
    )

    assert response.headers["access-control-allow-origin"] == "*"
    assert preflight.status_code == 200
    assert "GET" in preflight.headers["access-control-allow-methods"]
    assert "OPTIONS" in preflight.headers["access-control-allow-methods"]


def test_metrics_endpoint_exposes_fetch_metrics() -> None:
    client = TestClient(create_app())
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "seoul_api_page_requests_total" in response.text
    assert "toilet_fetch_last_run_duration_seconds" in response.text

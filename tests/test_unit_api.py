import pytest
from fastapi.testclient import TestClient

from conftest import FakeSource
from cloudflare_exporter import main
from cloudflare_exporter.errors import SourceUnavailable


@pytest.fixture
def api(monkeypatch, single_zone_source):
    monkeypatch.setattr(main.COLLECTOR, "source", single_zone_source)
    return TestClient(main.app)


def test_health(api):
    r = api.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_metrics(api):
    r = api.get("/metrics")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert 'cloudflare_zone_requests_total{zone="example.com"} 100.0' in r.text
    assert "cloudflare_exporter_scrapes_total" in r.text


def test_metrics_zone_list_failure(api, monkeypatch):
    monkeypatch.setattr(main.COLLECTOR, "source", FakeSource([], {}, list_error=SourceUnavailable("HTTP 403")))
    r = api.get("/metrics")
    assert r.status_code == 503
    assert "HTTP 403" in r.json()["detail"]

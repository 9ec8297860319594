"""Integration tests for the catalog API.

Uses FastAPI TestClient with a real CatalogStore reading a temp JSON file
(or a failing httpx transport) to test actual HTTP flows end-to-end.

Creates a fresh FastAPI app per test to avoid the "cannot add middleware
after application has started" issue with the shared singleton.
"""

import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from data.catalog_store import CatalogStore
from web.app import create_app
from web.cache import init_app_state
from web.middleware import SecurityHeadersMiddleware
from web.shared import limiter


def _create_test_app(config, store=None) -> FastAPI:
    """Build a fresh FastAPI app wired for testing."""
    test_app = create_app()
    init_app_state(test_app.state, config, store=store)
    test_app.add_middleware(SecurityHeadersMiddleware)
    return test_app


@pytest.fixture(autouse=True)
def _reset_limiter():
    """Disable rate limiting for tests, restore after."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def catalog_file(sample_config, sample_records, video_factory):
    records = sample_records + [
        video_factory(f"lullaby-{i}", ["Lullabies & Sleep"], days_ago=30 + i) for i in range(14)
    ]
    path = sample_config.catalog.source
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f)
    return path


@pytest.fixture
def client(sample_config, catalog_file):
    app = _create_test_app(sample_config)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def failing_client(sample_config):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    store = CatalogStore(source="https://example.org/videos.json",
                         transport=httpx.MockTransport(handler))
    app = _create_test_app(sample_config, store=store)
    return TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestCatalogLoading:
    def test_loaded_once_across_requests(self, sample_config, sample_records):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=sample_records)

        store = CatalogStore(source="https://example.org/videos.json",
                             transport=httpx.MockTransport(handler))
        c = TestClient(_create_test_app(sample_config, store=store), raise_server_exceptions=False)
        c.get("/api/home")
        c.get("/api/videos")
        c.get("/api/categories")
        assert len(calls) == 1

    def test_healthz_before_and_after_load(self, client):
        assert client.get("/healthz").json() == {"status": "ok", "videos": 0}
        client.get("/api/home")
        assert client.get("/healthz").json() == {"status": "ok", "videos": 19}

    def test_security_headers(self, client):
        resp = client.get("/api/home")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert "frame-src https://www.youtube.com" in resp.headers["Content-Security-Policy"]


# ---------------------------------------------------------------------------
# Home + categories
# ---------------------------------------------------------------------------

class TestHomeAndCategories:
    def test_home(self, client):
        data = client.get("/api/home").json()
        assert len(data["latest"]) == 8
        assert data["latest"][0]["slug"] == "onam-festival"
        assert len(data["popular_categories"]) == 5
        assert data["popular_categories"][0]["name"] == "Lullabies & Sleep"
        assert data["popular_categories"][0]["count"] == 15
        assert data["json_ld"]["@type"] == "WebSite"
        assert data["site"]["channel_name"] == "Ambambo Kili"

    def test_categories_index(self, client):
        cats = client.get("/api/categories").json()["categories"]
        assert [c["count"] for c in cats] == sorted((c["count"] for c in cats), reverse=True)

    def test_category_page(self, client):
        resp = client.get("/api/categories/lullabies-and-sleep")
        assert resp.status_code == 200
        data = resp.json()
        assert data["category"]["name"] == "Lullabies & Sleep"
        assert data["heading"] == "Lullabies & Sleep Malayalam Kids Songs"
        assert len(data["videos"]) == 15
        assert data["videos"][0]["slug"] == "sleepy-moon"
        assert data["meta"]["links"][0]["href"].endswith("/categories/lullabies-and-sleep/")

    def test_unknown_category(self, client):
        resp = client.get("/api/categories/does-not-exist")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Category not found."}


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestVideoListing:
    def test_default_page(self, client):
        data = client.get("/api/videos").json()
        assert len(data["videos"]) == 12
        assert data["total"] == 19
        assert data["total_pages"] == 2
        assert data["status"] == "Page 1 of 2"
        assert data["has_next"] and not data["has_prev"]
        assert data["categories"][0] == "Animals"

    def test_category_pagination(self, client):
        data = client.get("/api/videos", params={
            "category": "Lullabies & Sleep", "page": 2}).json()
        assert data["page"] == 2
        assert len(data["videos"]) == 3
        assert data["total"] == 15

    def test_page_clamped(self, client):
        data = client.get("/api/videos", params={"page": 50}).json()
        assert data["page"] == 2

    def test_search(self, client):
        data = client.get("/api/videos", params={"q": "elephant", "per_page": 5}).json()
        assert data["total"] == 2
        assert [v["slug"] for v in data["videos"]] == ["elephant-song", "counting-mangoes"]

    def test_per_page_out_of_range(self, client):
        assert client.get("/api/videos", params={"per_page": 500}).status_code == 422


# ---------------------------------------------------------------------------
# Video page
# ---------------------------------------------------------------------------

class TestVideoPage:
    def test_video_page(self, client):
        data = client.get("/api/videos/elephant-song").json()
        assert data["video"]["title"] == "Elephant Song"
        assert len(data["related"]) == 3
        assert "elephant-song" not in [v["slug"] for v in data["related"]]
        # rain-rain shares "Rhymes"
        assert data["related"][0]["slug"] == "rain-rain"
        assert len(data["more"]) == 4
        assert data["more"][0]["label"].startswith("Discover the ")
        assert data["json_ld"]["@type"] == "VideoObject"
        assert data["robots"] == "index, follow"
        assert data["breadcrumbs"][-1]["label"] == "Elephant Song"

    def test_unknown_video(self, client):
        resp = client.get("/api/videos/no-such-video")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Video not found."}

    def test_numeric_description_served(self, sample_config, video_factory):
        with open(sample_config.catalog.source, "w", encoding="utf-8") as f:
            json.dump([video_factory("a", description_short=12345)], f)
        c = TestClient(_create_test_app(sample_config), raise_server_exceptions=False)
        resp = c.get("/api/videos/a")
        assert resp.status_code == 200
        assert resp.json()["video"]["description_short"] == "12345"


# ---------------------------------------------------------------------------
# Load failure
# ---------------------------------------------------------------------------

class TestLoadFailure:
    @pytest.mark.parametrize("path", [
        "/api/home", "/api/videos", "/api/categories",
        "/api/categories/rhymes", "/api/videos/rain-rain",
    ])
    def test_explicit_error(self, failing_client, path):
        resp = failing_client.get(path)
        assert resp.status_code == 503
        assert "could not load the video library" in resp.json()["error"]

    def test_healthz_degraded(self, failing_client):
        failing_client.get("/api/home")
        assert failing_client.get("/healthz").json() == {"status": "degraded", "videos": 0}

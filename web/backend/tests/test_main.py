"""Tests for FastAPI application."""

import shutil

from zero_music import __version__


def test_health_endpoint(client, music_dir):
    """Test health check reports an accessible music directory."""
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["music_dir_accessible"] is True
    assert body["music_directory"] == str(music_dir)
    assert body["song_count"] == 0  # health never scans


def test_health_degraded_without_music_dir(client, music_dir):
    shutil.rmtree(music_dir)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["music_dir_accessible"] is False


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["version"] == __version__
    assert any("/api/stream/{id}" in endpoint for endpoint in body["endpoints"])


def test_cors_headers(client):
    """Test CORS headers are present."""
    response = client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_cors_exposes_range_headers(client):
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})
    exposed = response.headers["access-control-expose-headers"].lower()
    assert "content-range" in exposed
    assert "accept-ranges" in exposed


class TestRequestId:
    def test_generated_when_absent(self, client):
        response = client.get("/health")
        request_id = response.headers["x-request-id"]
        assert len(request_id) == 32
        int(request_id, 16)

    def test_client_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123.x_y"})
        assert response.headers["x-request-id"] == "abc-123.x_y"

    def test_unsafe_client_id_replaced(self, client):
        response = client.get("/health", headers={"X-Request-ID": "bad id;rm"})
        assert response.headers["x-request-id"] != "bad id;rm"
        assert len(response.headers["x-request-id"]) == 32

    def test_present_on_errors(self, client):
        response = client.get("/api/song/not-an-id")
        assert response.status_code == 400
        assert "x-request-id" in response.headers

"""Pytest fixtures for Grafana snapshot service tests."""

import httpx
import pytest

from snapshot_service.grafana.models import Dashboard, Panel

# PNG signature followed by every byte value, so any text decoding would corrupt it
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


class FakeGrafana:
    """Stub Grafana upstream served through httpx.MockTransport."""

    def __init__(
        self,
        dashboards: dict[str, dict] | None = None,
        images: dict[int, bytes] | None = None,
    ):
        # uid -> JSON body of /api/dashboards/uid/<uid>
        self.dashboards = dashboards or {}
        # panel id -> image bytes; panels missing here fail to render
        self.images = images or {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/api/dashboards/uid/"):
            uid = path.rsplit("/", 1)[-1]
            if uid not in self.dashboards:
                return httpx.Response(404, json={"message": "Dashboard not found"})
            return httpx.Response(200, json=self.dashboards[uid])

        if path.startswith("/render/d-solo/"):
            panel_id = int(request.url.params["panelId"])
            image = self.images.get(panel_id)
            if image is None:
                return httpx.Response(500, text="Rendering failed")
            return httpx.Response(200, content=image, headers={"Content-Type": "image/png"})

        return httpx.Response(404, json={"message": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def render_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/render/")]


@pytest.fixture
def png_bytes() -> bytes:
    """Binary image body containing every byte value."""
    return PNG_BYTES


@pytest.fixture
def grafana_dashboard_response() -> dict:
    """Sample Grafana API dashboard response."""
    return {
        "meta": {"slug": "production-metrics"},
        "dashboard": {
            "uid": "abc123",
            "title": "Production Metrics",
            "panels": [
                {"id": 1, "type": "stat", "title": "CPU Usage"},
                {"id": 2, "type": "timeseries", "title": "Traffic"},
                {"id": 7, "type": "gauge", "title": "Memory"},
            ],
        },
    }


@pytest.fixture
def sample_dashboard() -> Dashboard:
    """Create a sample dashboard."""
    return Dashboard(
        uid="abc123",
        title="Production Metrics",
        panels=[
            Panel(id=1, type="stat", title="CPU Usage"),
            Panel(id=2, type="timeseries", title="Traffic"),
        ],
    )


@pytest.fixture
def fake_grafana(grafana_dashboard_response: dict, png_bytes: bytes) -> FakeGrafana:
    """Grafana stub knowing dashboard abc123 and able to render all its panels."""
    return FakeGrafana(
        dashboards={"abc123": grafana_dashboard_response},
        images={
            1: png_bytes,
            2: b"\x00\xff\xfe" + png_bytes,
            7: bytes(reversed(png_bytes)),
        },
    )


@pytest.fixture
def make_fake_grafana():
    """Factory for Grafana stubs with custom dashboards and images."""
    return FakeGrafana

"""Async HTTP client for Grafana API."""

import asyncio
import base64
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

from .exceptions import (
    GrafanaAPIError,
    GrafanaAuthError,
    GrafanaConnectionError,
    GrafanaMalformedResponseError,
    GrafanaNotFoundError,
)
from .models import Dashboard

# Grafana's solo-panel renderer ignores the slug, but the route requires one
RENDER_SLUG = "new-dashboard"
RENDER_ORG_ID = 1


class GrafanaClient:
    """Async HTTP client for fetching dashboards and panel renders from Grafana."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float | None = 30.0,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Grafana client.

        Args:
            url: Base URL of Grafana instance (e.g., https://grafana.example.com)
            api_key: Grafana API key or service account token
            timeout: Request timeout in seconds, or None to wait indefinitely
            verify_ssl: Whether to verify SSL certificates
            transport: Optional httpx transport (used to stub Grafana in tests)
        """
        self.base_url = url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            verify=verify_ssl,
            transport=transport,
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make an authenticated request to Grafana and check its status.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /api/dashboards/uid/xxx)
            **kwargs: Additional arguments to pass to httpx

        Returns:
            The successful httpx response

        Raises:
            GrafanaAuthError: If authentication fails
            GrafanaNotFoundError: If resource not found
            GrafanaAPIError: For other API errors
            GrafanaConnectionError: If connection fails
        """
        url = f"{self.base_url}{path}"

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.ConnectError as e:
            raise GrafanaConnectionError(f"Failed to connect to {self.base_url}: {e}")
        except httpx.TimeoutException:
            raise GrafanaConnectionError(f"Request to {url} timed out")
        except httpx.TransportError as e:
            raise GrafanaConnectionError(f"Request to {url} failed: {e}")

        if response.status_code == 401:
            raise GrafanaAuthError("Invalid or expired API key")
        if response.status_code == 403:
            raise GrafanaAuthError(
                "API key does not have permission for this operation", status_code=403
            )
        if response.status_code == 404:
            raise GrafanaNotFoundError(f"Resource not found: {path}")
        if not response.is_success:
            raise GrafanaAPIError(
                f"Grafana API error: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        return response

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an authenticated request and decode the JSON body."""
        response = await self._send(method, path, **kwargs)
        try:
            return response.json()
        except ValueError:
            raise GrafanaMalformedResponseError(f"Response from {path} is not valid JSON")

    async def get_dashboard(self, uid: str) -> Dashboard | None:
        """
        Fetch a dashboard by UID.

        Args:
            uid: Dashboard UID

        Returns:
            Dashboard object, or None if Grafana does not know the dashboard

        Raises:
            GrafanaMalformedResponseError: If the dashboard object is invalid
            GrafanaAPIError: For transport, auth and other upstream failures
        """
        try:
            response = await self._request(
                "GET",
                f"/api/dashboards/uid/{uid}",
                headers={"Content-Type": "application/json"},
            )
        except GrafanaNotFoundError:
            return None

        dashboard_data = response.get("dashboard") if isinstance(response, dict) else None
        if not isinstance(dashboard_data, dict):
            return None

        return Dashboard.from_api_response(dashboard_data)

    async def render_panel(self, dashboard_uid: str, panel_id: int) -> bytes:
        """
        Render a single panel to an image.

        Args:
            dashboard_uid: Dashboard UID
            panel_id: Panel ID within the dashboard

        Returns:
            Raw image bytes as returned by the Grafana image renderer
        """
        response = await self._send(
            "GET",
            f"/render/d-solo/{dashboard_uid}/{RENDER_SLUG}",
            params={"orgId": RENDER_ORG_ID, "panelId": panel_id},
        )
        return response.content

    async def render_panel_base64(self, dashboard_uid: str, panel_id: int) -> str:
        """Render a panel and return the image as a base64 string."""
        image = await self.render_panel(dashboard_uid, panel_id)
        return base64.b64encode(image).decode("ascii")

    async def render_panels(self, dashboard: Dashboard) -> list[str]:
        """
        Render every panel of a dashboard concurrently.

        All renders are started at once and joined. The first failure cancels
        the renders still in flight and is re-raised, so a partial list is
        never returned.

        Args:
            dashboard: Dashboard whose panels should be rendered

        Returns:
            Base64-encoded images, in panel order
        """
        tasks = [
            asyncio.ensure_future(self.render_panel_base64(dashboard.uid, panel.id))
            for panel in dashboard.panels
        ]
        if not tasks:
            return []

        logger.info(f"Rendering {len(tasks)} panels of dashboard {dashboard.uid}")

        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            logger.warning(f"Rendering dashboard {dashboard.uid} failed, cancelling pending panels")
            for task in tasks:
                task.cancel()
            # Let cancelled renders unwind before the HTTP client is closed
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GrafanaClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

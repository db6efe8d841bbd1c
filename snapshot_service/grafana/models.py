"""Data models for Grafana API responses."""

from dataclasses import dataclass, field
from typing import Any

from .exceptions import GrafanaMalformedResponseError


@dataclass
class Panel:
    """Represents a Grafana dashboard panel."""

    id: int
    type: str = "unknown"
    title: str = "Untitled"

    @classmethod
    def from_api_response(cls, panel_data: Any) -> "Panel":
        """
        Parse panel from dashboard JSON.

        Raises:
            GrafanaMalformedResponseError: If the entry is not an object or has
                no integer ``id``.
        """
        if not isinstance(panel_data, dict):
            raise GrafanaMalformedResponseError(
                f"Panel entry must be an object, got {type(panel_data).__name__}"
            )

        panel_id = panel_data.get("id")
        # bool is an int subclass, but never a valid panel id
        if not isinstance(panel_id, int) or isinstance(panel_id, bool):
            raise GrafanaMalformedResponseError(f"Panel has no integer id: {panel_id!r}")

        return cls(
            id=panel_id,
            type=panel_data.get("type") or "unknown",
            title=panel_data.get("title") or "Untitled",
        )


@dataclass
class Dashboard:
    """Represents a Grafana dashboard."""

    uid: str
    title: str
    panels: list[Panel] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, dashboard_data: dict[str, Any]) -> "Dashboard":
        """
        Parse the ``dashboard`` object of a /api/dashboards/uid response.

        Only top-level panels are taken; each one is rendered as a single image.

        Raises:
            GrafanaMalformedResponseError: If ``uid`` or ``panels`` are missing
                or of the wrong type.
        """
        uid = dashboard_data.get("uid")
        if not isinstance(uid, str) or not uid:
            raise GrafanaMalformedResponseError(f"Dashboard has no uid: {uid!r}")

        panels_data = dashboard_data.get("panels")
        if not isinstance(panels_data, list):
            raise GrafanaMalformedResponseError(
                f"Dashboard {uid} has no panel list"
            )

        return cls(
            uid=uid,
            title=dashboard_data.get("title") or "Untitled",
            panels=[Panel.from_api_response(p) for p in panels_data],
        )


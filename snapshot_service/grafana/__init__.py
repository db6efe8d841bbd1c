"""Grafana API integration module."""

from .client import GrafanaClient
from .exceptions import (
    GrafanaAPIError,
    GrafanaAuthError,
    GrafanaConnectionError,
    GrafanaMalformedResponseError,
    GrafanaNotFoundError,
)
from .models import Dashboard, Panel

__all__ = [
    "GrafanaClient",
    "GrafanaAPIError",
    "GrafanaAuthError",
    "GrafanaConnectionError",
    "GrafanaMalformedResponseError",
    "GrafanaNotFoundError",
    "Dashboard",
    "Panel",
]

"""Flask API serving Grafana panel snapshots.

GET /snap?conf=<host>@<dashboardUID> renders every panel of the dashboard and
returns them as base64-encoded images.
"""

import logging
from flask import Flask, jsonify, request

from snapshot_service.config import ConfigError, load_config
from snapshot_service.credentials import CredentialResolver
from snapshot_service.grafana import GrafanaClient, GrafanaAPIError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)


def parse_conf(conf: str) -> tuple[str, str]:
    """
    Split a ``<host>@<dashboardUID>`` identifier on its first ``@``.

    A value without ``@`` yields an empty dashboard UID.
    """
    host, _, dashboard_uid = conf.partition("@")
    return host, dashboard_uid


def error_response(message: str, status: int):
    return jsonify({"message": message}), status


@app.route("/snap", methods=["GET"])
async def snap():
    """
    Render all panels of a Grafana dashboard.

    Query parameters:
        conf: ``<host>@<dashboardUID>``, where host is a configured Grafana URL

    Returns:
        200 {"snapshots": [...]} with one base64 image per panel,
        400 when conf is missing, 404 for an unknown host or dashboard,
        500 when Grafana or the configuration fails.
    """
    conf = request.args.get("conf", "")
    if not conf:
        return error_response("No Conf provided", 400)

    try:
        config = load_config()
        if not config.integrations:
            logger.error("No Grafana integrations configured (GRAFANA_INTEGRATIONS is empty)")
            return error_response("No Grafana integrations configured", 500)

        resolver = CredentialResolver.from_integrations(config.integrations)
        host, dashboard_uid = parse_conf(conf)
        logger.info(f"Request: host={host}, dashboard={dashboard_uid}")

        token = resolver.resolve(host)
        if token is None:
            logger.warning(f"Host {host} not among {len(resolver)} configured Grafana hosts")
            return error_response("Host not found", 404)

        async with GrafanaClient(host, token, timeout=config.grafana_timeout) as client:
            dashboard = await client.get_dashboard(dashboard_uid)
            if dashboard is None:
                logger.warning(f"Dashboard {dashboard_uid} not found on {host}")
                return error_response("Dashboard not found", 404)

            logger.info(f"Dashboard '{dashboard.title}' has {len(dashboard.panels)} panels")
            snapshots = await client.render_panels(dashboard)

        logger.info(f"Returning {len(snapshots)} snapshots for dashboard {dashboard.uid}")
        return jsonify({"snapshots": snapshots})

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return error_response("Internal server error", 500)

    except GrafanaAPIError as e:
        logger.error(f"Grafana error: {e}")
        return error_response("Internal server error", 500)

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return error_response("Internal server error", 500)


@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


def create_app():
    """Application factory for gunicorn."""
    return app

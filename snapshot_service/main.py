#!/usr/bin/env python3
"""Main entry point for the Grafana snapshot service."""

import logging
import sys

from snapshot_service.config import Config, ConfigError, load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def check_config(config: Config) -> int:
    """
    Report the loaded configuration without serving requests.

    Args:
        config: Service configuration

    Returns:
        Exit code (0 if at least one integration is usable, 1 otherwise)
    """
    hosts = [i.host for i in config.integrations if i.host and i.token]
    if not hosts:
        logger.error("No usable Grafana integrations configured")
        return 1

    for host in hosts:
        logger.info(f"Grafana integration: {host}")
    return 0


def serve(config: Config) -> None:
    """
    Run the Flask development server.

    Args:
        config: Service configuration
    """
    from snapshot_service.api import app

    logger.info(f"Listening on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port)


def main() -> int:
    """Main entry point."""
    logger.info("Grafana Snapshot Service starting...")

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Configuration error:\n{e}")
        return 1

    logging.getLogger().setLevel(config.log_level)
    logger.info(f"Configured {len(config.integrations)} Grafana integrations")
    if config.grafana_timeout is None:
        logger.warning("GRAFANA_TIMEOUT disabled, slow Grafana hosts can stall requests")

    # Check for run mode
    if "--check" in sys.argv:
        return check_config(config)

    serve(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Configuration management for the snapshot service."""

import json
from dataclasses import dataclass, field
from os import environ

from dotenv import load_dotenv

DEFAULT_TIMEOUT = 30.0
DEFAULT_PORT = 8080
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class Integration:
    """A Grafana instance this service may query."""

    host: str
    token: str


@dataclass
class Config:
    """Snapshot service configuration loaded from environment variables."""

    # Grafana connections
    integrations: list[Integration] = field(default_factory=list)
    grafana_timeout: float | None = DEFAULT_TIMEOUT  # None waits indefinitely

    # HTTP server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def _as_string(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def parse_integrations(raw: str) -> list[Integration]:
    """
    Parse the JSON integrations list.

    Each entry is an object with optional ``host`` and ``token`` fields;
    missing or null values become empty strings.

    Raises:
        ConfigError: If the value is not a JSON array of objects.
    """
    if not raw.strip():
        return []

    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"GRAFANA_INTEGRATIONS is not valid JSON: {e}")

    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ConfigError("GRAFANA_INTEGRATIONS must be a JSON array")

    integrations = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"GRAFANA_INTEGRATIONS[{i}] must be an object")
        integrations.append(Integration(
            host=_as_string(entry.get("host")),
            token=_as_string(entry.get("token")),
        ))
    return integrations


def _parse_timeout(value: str) -> float | None:
    value = value.strip().lower()
    if value in ("0", "none", "off"):
        return None
    try:
        timeout = float(value)
    except ValueError:
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else None


def load_config() -> Config:
    """
    Load configuration from environment variables.

    Grafana:
        - GRAFANA_INTEGRATIONS: JSON array of {"host": ..., "token": ...} objects
        - GRAFANA_TIMEOUT: Upstream request timeout in seconds (default: 30,
          0 or "none" disables it)

    Server:
        - HOST: Bind address (default: 0.0.0.0)
        - PORT: Bind port (default: 8080)
        - LOG_LEVEL: Logging level (default: INFO)

    Raises:
        ConfigError: If GRAFANA_INTEGRATIONS is malformed.
    """
    load_dotenv()

    integrations = parse_integrations(environ.get("GRAFANA_INTEGRATIONS", ""))

    # Parse port
    port_str = environ.get("PORT", str(DEFAULT_PORT))
    try:
        port = int(port_str)
    except ValueError:
        port = DEFAULT_PORT

    log_level = environ.get("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    return Config(
        integrations=integrations,
        grafana_timeout=_parse_timeout(environ.get("GRAFANA_TIMEOUT", str(DEFAULT_TIMEOUT))),
        host=environ.get("HOST", "0.0.0.0"),
        port=port,
        log_level=log_level,
    )

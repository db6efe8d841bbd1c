"""Host to token lookup built from the configured Grafana integrations."""

from typing import Iterable

from snapshot_service.config import Integration


class CredentialResolver:
    """Resolves the bearer token to use for a Grafana host."""

    def __init__(self, tokens: dict[str, str] | None = None):
        self._tokens = dict(tokens or {})

    @classmethod
    def from_integrations(cls, integrations: Iterable[Integration]) -> "CredentialResolver":
        """
        Build the host table in one pass over the integrations.

        Entries without a host are skipped. A host listed more than once keeps
        the token of its last entry.
        """
        tokens: dict[str, str] = {}
        for integration in integrations:
            if integration.host != "":
                tokens[integration.host] = integration.token
        return cls(tokens)

    def resolve(self, host: str) -> str | None:
        """
        Return the token for an exact host match.

        Returns None for unknown hosts and for hosts configured with an empty
        token.
        """
        return self._tokens.get(host) or None

    def __len__(self) -> int:
        return len(self._tokens)

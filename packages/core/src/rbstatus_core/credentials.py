"""Credential lookup for Review Board API tokens."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from rbstatus_core.registry import ServerConfiguration

UNKNOWN_TOKEN = "UNKNOWN"


class BaseCredentialStore(ABC):
    """Resolves a credential ID to its secret."""

    @abstractmethod
    def resolve(self, credential_id: str, scope_url: str) -> str | None:
        """Return the secret for ``credential_id`` usable against ``scope_url``, or None."""


class StaticCredentialStore(BaseCredentialStore):
    """Credentials held in a plain mapping of ID to secret."""

    def __init__(self, secrets: Mapping[str, str] | None = None):
        self._secrets = dict(secrets or {})

    def resolve(self, credential_id: str, scope_url: str) -> str | None:
        return self._secrets.get(credential_id) or None


class ChainCredentialStore(BaseCredentialStore):
    """Asks each store in turn and returns the first secret found."""

    def __init__(self, *stores: BaseCredentialStore):
        self._stores = stores

    def resolve(self, credential_id: str, scope_url: str) -> str | None:
        for store in self._stores:
            secret = store.resolve(credential_id, scope_url)
            if secret:
                return secret
        return None


def get_api_token(config: ServerConfiguration, credentials: BaseCredentialStore | None) -> str:
    """Return the API token for a server configuration, or ``"UNKNOWN"``.

    A missing credential is not an error: the request is still sent and the
    server answers it with 401.
    """
    if credentials is None:
        return UNKNOWN_TOKEN
    token = credentials.resolve(config.credential_id, config.server_url)
    return token if token else UNKNOWN_TOKEN

"""Review Board API token resolution.

Tokens never live in the server list — only credential IDs do. The token
for an ID is resolved at request time, stopping at the first success:
  1. RBSTATUS_CREDENTIAL_<ID> environment variable (CI secret injection)
  2. the ``credentials`` mapping in .rbstatus.yml

An ID with no token resolves to "UNKNOWN" in rbstatus_core, so the request
is still sent and rejected by the server with 401.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping

from rbstatus_core.credentials import BaseCredentialStore, ChainCredentialStore, StaticCredentialStore

logger = logging.getLogger(__name__)

ENV_PREFIX = "RBSTATUS_CREDENTIAL_"


def credential_env_var(credential_id: str) -> str:
    """Environment variable name holding the token for ``credential_id``.

    >>> credential_env_var("rb-prod.token")
    'RBSTATUS_CREDENTIAL_RB_PROD_TOKEN'
    """
    return ENV_PREFIX + re.sub(r"[^A-Za-z0-9]", "_", credential_id).upper()


class EnvCredentialStore(BaseCredentialStore):
    """Looks tokens up in the process environment."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    def resolve(self, credential_id: str, scope_url: str) -> str | None:
        token = self._environ.get(credential_env_var(credential_id))
        if token:
            logger.debug("Resolved credential %r from the environment.", credential_id)
            return token
        return None


def build_credential_store(config: dict) -> BaseCredentialStore:
    """Environment first so CI can always override what the config file says."""
    return ChainCredentialStore(
        EnvCredentialStore(),
        StaticCredentialStore(config.get("credentials") or {}),
    )

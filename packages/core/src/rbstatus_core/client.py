"""Review Board status update client.

Updates one status update resource with a single authenticated PUT:

    PUT {server}/api/review-requests/{review_id}/status-updates/{status_update_id}/
    Authorization: token {api_token}
    Content-Type: application/x-www-form-urlencoded

    state=...&description=...[&url=...&url_text=...]

No retries are made; calling twice sends two PUTs and the server keeps the
last one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from rbstatus_core.credentials import get_api_token
from rbstatus_core.errors import (
    Forbidden,
    NoServerConfiguration,
    NoServerConfigurationsLoaded,
    ResourceNotFound,
    ServerUnreachable,
    Unauthorized,
    UnexpectedResponse,
)
from rbstatus_core.urls import join_api_path

if TYPE_CHECKING:
    from rbstatus_core.credentials import BaseCredentialStore
    from rbstatus_core.registry import ServerConfiguration, ServerRegistry
    from rbstatus_core.review_request import ReviewRequest, StatusUpdateState

logger = logging.getLogger(__name__)

STATUS_UPDATE_PATH = "/api/review-requests/{review_id}/status-updates/{status_update_id}/"
DEFAULT_TIMEOUT = 30.0


def status_update_url(base_url: str, review_id: int, status_update_id: int) -> str:
    return join_api_path(
        base_url,
        STATUS_UPDATE_PATH.format(review_id=review_id, status_update_id=status_update_id),
    )


def build_form(
    state: StatusUpdateState,
    description: str,
    link_url: str | None = None,
    link_text: str | None = None,
) -> dict[str, str]:
    """Form fields for the PUT body; ``url``/``url_text`` only when given."""
    form = {"state": str(state), "description": description}
    if link_url is not None:
        form["url"] = link_url
    if link_text is not None:
        form["url_text"] = link_text
    return form


class StatusUpdateClient:
    """Sends status update state changes to the configured Review Board servers.

    Args:
        registry: Server configurations to resolve ``ReviewRequest.server_url`` against.
        credentials: Where API tokens are looked up. None means every token is "UNKNOWN".
        timeout: HTTP timeout in seconds, or None to wait indefinitely.
        transport: Optional httpx transport, for tests or proxies.
    """

    def __init__(
        self,
        registry: ServerRegistry,
        credentials: BaseCredentialStore | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.registry = registry
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport

    def resolve_server(self, review_request: ReviewRequest) -> ServerConfiguration:
        """Find the configuration for the review request's server.

        Raises:
            NoServerConfigurationsLoaded: the registry was never populated.
            NoServerConfiguration: no configured server matches.
        """
        if not self.registry.loaded:
            raise NoServerConfigurationsLoaded()
        config = self.registry.lookup(review_request.server_url)
        if config is None:
            raise NoServerConfiguration(str(review_request.server_url))
        return config

    def api_token(self, config: ServerConfiguration) -> str:
        return get_api_token(config, self.credentials)

    def update_status_update(
        self,
        review_request: ReviewRequest,
        state: StatusUpdateState,
        description: str,
        link_url: str | None = None,
        link_text: str | None = None,
    ) -> None:
        """Set the state and description of the review request's status update.

        Raises a ReviewBoardError subclass on any failure; returns None on HTTP 200.
        """
        config = self.resolve_server(review_request)
        token = self.api_token(config)
        url = status_update_url(config.server_url, review_request.review_id, review_request.status_update_id)
        headers = {
            "Authorization": f"token {token}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        form = build_form(state, description, link_url, link_text)

        logger.info("Updating status update %s to %s", url, state)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.put(url, data=form, headers=headers)
        except httpx.RequestError as e:
            raise ServerUnreachable(f"Unable to communicate with Review Board server {config.server_url}: {e}") from e

        _check_response(response)
        logger.debug("Status update %s is now %s", url, state)


def _check_response(response: httpx.Response) -> None:
    code = response.status_code
    if code == 200:
        return
    if code == 404:
        raise ResourceNotFound("The status update or review request does not exist.")
    if code == 403:
        raise Forbidden("The API token does not have permission to update the status update.")
    if code == 401:
        raise Unauthorized("The API token is invalid.")
    raise UnexpectedResponse(code)

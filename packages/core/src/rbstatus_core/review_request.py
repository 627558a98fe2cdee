"""The review request that triggered a build, parsed from build parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from rbstatus_core.errors import MalformedParameter
from rbstatus_core.urls import validate_url

REVIEWBOARD_REVIEW_ID = "REVIEWBOARD_REVIEW_ID"
REVIEWBOARD_DIFF_REVISION = "REVIEWBOARD_DIFF_REVISION"
REVIEWBOARD_STATUS_UPDATE_ID = "REVIEWBOARD_STATUS_UPDATE_ID"
REVIEWBOARD_SERVER = "REVIEWBOARD_SERVER"

RECOGNIZED_PARAMETERS = (
    REVIEWBOARD_SERVER,
    REVIEWBOARD_REVIEW_ID,
    REVIEWBOARD_DIFF_REVISION,
    REVIEWBOARD_STATUS_UPDATE_ID,
)

ABSENT = -1


class StatusUpdateState(str, Enum):
    """States a Review Board status update can be in. ``.value`` is sent on the wire."""

    PENDING = "pending"
    SUCCESS = "done-success"
    FAILURE = "done-failure"
    ERROR = "error"
    TIMED_OUT = "timed-out"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ReviewRequest:
    """Identifies the review request, diff revision and status update for one build.

    Integer fields use ``-1`` when the matching parameter was not provided;
    ``server_url`` is None in that case.
    """

    review_id: int = ABSENT
    revision: int = ABSENT
    status_update_id: int = ABSENT
    server_url: str | None = None

    def is_complete_for_notification(self) -> bool:
        return self.review_id != ABSENT and self.status_update_id != ABSENT and self.server_url is not None

    def is_complete_for_patch(self) -> bool:
        return self.is_complete_for_notification() and self.revision != ABSENT


def _parse_int(name: str, value) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise MalformedParameter(name, value) from None


def parse_review_request(parameters: Iterable[tuple[str, str]]) -> ReviewRequest:
    """Build a ReviewRequest from ``(name, value)`` build parameter pairs.

    Unrecognized names are ignored; when a name repeats, the last value wins.

    Raises:
        InvalidServerURL: REVIEWBOARD_SERVER is not a valid URL.
        MalformedParameter: one of the numeric parameters is not an integer.
    """
    review_id = ABSENT
    revision = ABSENT
    status_update_id = ABSENT
    server_url = None

    for name, value in parameters:
        if name == REVIEWBOARD_REVIEW_ID:
            review_id = _parse_int(name, value)
        elif name == REVIEWBOARD_DIFF_REVISION:
            revision = _parse_int(name, value)
        elif name == REVIEWBOARD_STATUS_UPDATE_ID:
            status_update_id = _parse_int(name, value)
        elif name == REVIEWBOARD_SERVER:
            server_url = validate_url(value)

    return ReviewRequest(
        review_id=review_id,
        revision=revision,
        status_update_id=status_update_id,
        server_url=server_url,
    )

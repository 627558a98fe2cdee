"""Post-build step: report the build result to Review Board.

Notification is best-effort. Nothing here fails the build: every problem is
written to the build listener and the step returns normally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from rbstatus_core.errors import InvalidServerURL, ReviewBoardError
from rbstatus_core.outcome import classify_build_result
from rbstatus_core.review_request import parse_review_request

if TYPE_CHECKING:
    from rbstatus_core.client import StatusUpdateClient
    from rbstatus_core.listener import BuildListener
    from rbstatus_core.outcome import BuildResult

INVALID_URL_MESSAGE = "URL provided in REVIEWBOARD_SERVER is not a valid URL."
MISSING_PARAMETERS_MESSAGE = (
    "REVIEWBOARD_REVIEW_ID, or REVIEWBOARD_STATUS_UPDATE_ID, or REVIEWBOARD_SERVER not provided in parameters"
)


def notify_build_result(
    parameters: Iterable[tuple[str, str]],
    result: BuildResult | str | None,
    client: StatusUpdateClient,
    listener: BuildListener,
) -> bool:
    """Update the triggering review request's status update with the build result.

    Returns True when Review Board accepted the update. The build is never
    failed by this step, whatever the return value.
    """
    try:
        review_request = parse_review_request(parameters)
    except InvalidServerURL:
        listener.error(INVALID_URL_MESSAGE)
        return False
    except ReviewBoardError as e:
        listener.error(str(e))
        return False

    if not review_request.is_complete_for_notification():
        listener.error(MISSING_PARAMETERS_MESSAGE)
        return False

    state, description = classify_build_result(result)

    try:
        client.update_status_update(review_request, state, description)
    except ReviewBoardError as e:
        listener.error(f"Unable to notify Review Board of the result of the build: {e}")
        return False

    listener.info(f"Review Board status update set to {state}: {description}")
    return True

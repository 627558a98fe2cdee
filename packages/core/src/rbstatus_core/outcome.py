"""Map a finished build's result to the status update state and description."""

from __future__ import annotations

from enum import Enum

from rbstatus_core.review_request import StatusUpdateState


class BuildResult(str, Enum):
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


JOB_SUCCEEDED = "job succeeded"
JOB_ABORTED = "job aborted"
JOB_NOT_BUILT = "job not built"
JOB_UNSTABLE = "job unstable"
JOB_FAILED = "job failed"

_OUTCOMES = {
    BuildResult.SUCCESS: (StatusUpdateState.SUCCESS, JOB_SUCCEEDED),
    BuildResult.ABORTED: (StatusUpdateState.ERROR, JOB_ABORTED),
    BuildResult.NOT_BUILT: (StatusUpdateState.ERROR, JOB_NOT_BUILT),
    BuildResult.UNSTABLE: (StatusUpdateState.FAILURE, JOB_UNSTABLE),
    BuildResult.FAILURE: (StatusUpdateState.FAILURE, JOB_FAILED),
}


def classify_build_result(result: BuildResult | str | None) -> tuple[StatusUpdateState, str]:
    """Return ``(state, description)`` for a terminal build result.

    Accepts a BuildResult or its name in any case. Anything unrecognized,
    including None, is reported as a failed job.
    """
    if not isinstance(result, BuildResult):
        try:
            result = BuildResult(str(result).strip().upper())
        except ValueError:
            result = BuildResult.FAILURE
    return _OUTCOMES[result]

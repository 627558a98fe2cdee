"""Tests for build result classification."""

import pytest

from rbstatus_core.outcome import BuildResult, classify_build_result
from rbstatus_core.review_request import StatusUpdateState


@pytest.mark.parametrize(
    "result, state, message",
    [
        (BuildResult.SUCCESS, StatusUpdateState.SUCCESS, "job succeeded"),
        (BuildResult.ABORTED, StatusUpdateState.ERROR, "job aborted"),
        (BuildResult.NOT_BUILT, StatusUpdateState.ERROR, "job not built"),
        (BuildResult.UNSTABLE, StatusUpdateState.FAILURE, "job unstable"),
        (BuildResult.FAILURE, StatusUpdateState.FAILURE, "job failed"),
    ],
)
def test_classification(result, state, message):
    assert classify_build_result(result) == (state, message)


def test_accepts_names_in_any_case():
    assert classify_build_result("not_built") == (StatusUpdateState.ERROR, "job not built")


@pytest.mark.parametrize("result", ["EXPLODED", "", None])
def test_unrecognized_result_is_failure(result):
    assert classify_build_result(result) == (StatusUpdateState.FAILURE, "job failed")

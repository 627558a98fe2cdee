"""Tests for parsing the review request from build parameters."""

import pytest

from rbstatus_core.errors import InvalidServerURL, MalformedParameter, ReviewBoardError
from rbstatus_core.review_request import ReviewRequest, StatusUpdateState, parse_review_request

FULL = [
    ("REVIEWBOARD_SERVER", "http://localhost"),
    ("REVIEWBOARD_REVIEW_ID", "1"),
    ("REVIEWBOARD_DIFF_REVISION", "3"),
    ("REVIEWBOARD_STATUS_UPDATE_ID", "2"),
]


class TestParseReviewRequest:
    def test_all_parameters(self):
        rr = parse_review_request(FULL)
        assert rr == ReviewRequest(review_id=1, revision=3, status_update_id=2, server_url="http://localhost")

    def test_no_parameters_leaves_sentinels(self):
        rr = parse_review_request([])
        assert rr.review_id == -1
        assert rr.revision == -1
        assert rr.status_update_id == -1
        assert rr.server_url is None

    def test_unrecognized_names_ignored(self):
        rr = parse_review_request([("BUILD_NUMBER", "7"), ("REVIEWBOARD_REVIEW_ID", "5")])
        assert rr.review_id == 5

    def test_last_value_wins(self):
        rr = parse_review_request([("REVIEWBOARD_REVIEW_ID", "5"), ("REVIEWBOARD_REVIEW_ID", "6")])
        assert rr.review_id == 6

    def test_invalid_server_url(self):
        with pytest.raises(InvalidServerURL):
            parse_review_request([("REVIEWBOARD_SERVER", "htp?:/invalidurl?/.")])

    @pytest.mark.parametrize(
        "name", ["REVIEWBOARD_REVIEW_ID", "REVIEWBOARD_DIFF_REVISION", "REVIEWBOARD_STATUS_UPDATE_ID"]
    )
    def test_non_numeric_value_is_malformed(self, name):
        with pytest.raises(MalformedParameter) as exc_info:
            parse_review_request([(name, "abc")])
        assert exc_info.value.name == name
        assert isinstance(exc_info.value, ReviewBoardError)

    def test_whitespace_around_integers_tolerated(self):
        assert parse_review_request([("REVIEWBOARD_REVIEW_ID", " 12 ")]).review_id == 12


class TestCompleteness:
    def test_complete_for_notification_without_revision(self):
        rr = ReviewRequest(review_id=1, status_update_id=2, server_url="http://localhost")
        assert rr.is_complete_for_notification()
        assert not rr.is_complete_for_patch()

    def test_complete_for_patch(self):
        assert parse_review_request(FULL).is_complete_for_patch()

    @pytest.mark.parametrize("missing", ["REVIEWBOARD_SERVER", "REVIEWBOARD_REVIEW_ID", "REVIEWBOARD_STATUS_UPDATE_ID"])
    def test_missing_required_parameter(self, missing):
        rr = parse_review_request([p for p in FULL if p[0] != missing])
        assert not rr.is_complete_for_notification()
        assert not rr.is_complete_for_patch()

    def test_descriptor_is_immutable(self):
        rr = parse_review_request(FULL)
        with pytest.raises(AttributeError):
            rr.review_id = 9


class TestStatusUpdateState:
    def test_wire_values(self):
        assert {s.name: s.value for s in StatusUpdateState} == {
            "PENDING": "pending",
            "SUCCESS": "done-success",
            "FAILURE": "done-failure",
            "ERROR": "error",
            "TIMED_OUT": "timed-out",
        }

    def test_str_is_wire_value(self):
        assert str(StatusUpdateState.TIMED_OUT) == "timed-out"

"""Tests for the pre-build patch step."""

from unittest.mock import MagicMock

import pytest

from rbstatus_core.client import StatusUpdateClient
from rbstatus_core.errors import NoServerConfiguration, NoServerConfigurationsLoaded, Unauthorized
from rbstatus_core.listener import BuildListener
from rbstatus_core.patcher import MISSING_PARAMETERS_MESSAGE, PatchStep
from rbstatus_core.process import ProcessExecutor
from rbstatus_core.registry import ServerConfiguration
from rbstatus_core.review_request import ReviewRequest, StatusUpdateState

SERVER_CONFIG = ServerConfiguration(server_url="http://localhost", credential_id="api_token")
PARAMS = [
    ("REVIEWBOARD_SERVER", "http://localhost"),
    ("REVIEWBOARD_REVIEW_ID", "1"),
    ("REVIEWBOARD_DIFF_REVISION", "3"),
    ("REVIEWBOARD_STATUS_UPDATE_ID", "2"),
]
REVIEW_REQUEST = ReviewRequest(review_id=1, revision=3, status_update_id=2, server_url="http://localhost")


def _mock_client(config=SERVER_CONFIG, token="secret-token"):
    client = MagicMock(spec=StatusUpdateClient)
    client.resolve_server.return_value = config
    client.api_token.return_value = token
    return client


def _mock_executor(*exit_codes):
    executor = MagicMock(spec=ProcessExecutor)
    if exit_codes:
        executor.run.side_effect = list(exit_codes)
    else:
        executor.run.return_value = 0
    return executor


class TestBuildCommands:
    def test_install_then_patch(self):
        commands = PatchStep().build_commands(REVIEW_REQUEST, SERVER_CONFIG, "tok")

        assert [args for args, _ in commands] == [
            ["pip", "install", "--user", "rbtools"],
            ["rbt", "patch", "--api-token", "tok", "--server", "http://localhost", "--diff-revision", "3", "1"],
        ]

    def test_token_is_masked(self):
        (args, masks), = PatchStep(install_rbtools=False).build_commands(REVIEW_REQUEST, SERVER_CONFIG, "tok")
        assert [a for a, m in zip(args, masks) if m] == ["tok"]

    def test_download_only_writes_patch_file(self):
        (args, _), = PatchStep(download_only=True, install_rbtools=False).build_commands(
            REVIEW_REQUEST, SERVER_CONFIG, "tok"
        )
        assert args[-3:] == ["--write", "patch.diff", "1"]

    def test_custom_commands(self):
        step = PatchStep(install_command="python -m pip install rbtools==5.0", rbt_command="/opt/rbt")
        commands = step.build_commands(REVIEW_REQUEST, SERVER_CONFIG, "tok")
        assert commands[0][0] == ["python", "-m", "pip", "install", "rbtools==5.0"]
        assert commands[1][0][0] == "/opt/rbt"


class TestPerform:
    def test_success_marks_pending(self):
        client = _mock_client()
        executor = _mock_executor()

        ok = PatchStep().perform(
            PARAMS, client, executor, BuildListener(), workspace="/ws", env={"A": "1"}, build_url="http://ci/job/1/"
        )

        assert ok is True
        assert executor.run.call_count == 2
        assert executor.run.call_args.kwargs["cwd"] == "/ws"
        assert executor.run.call_args.kwargs["env"] == {"A": "1"}
        client.update_status_update.assert_called_once_with(
            REVIEW_REQUEST, StatusUpdateState.PENDING, "build running", "http://ci/job/1/", "See build"
        )

    def test_without_build_url_no_link_is_sent(self):
        client = _mock_client()
        PatchStep(install_rbtools=False).perform(PARAMS, client, _mock_executor(), BuildListener())
        client.update_status_update.assert_called_once_with(
            REVIEW_REQUEST, StatusUpdateState.PENDING, "build running", None, None
        )

    def test_missing_revision_fails_build(self):
        client = _mock_client()
        executor = _mock_executor()
        listener = BuildListener()
        params = [p for p in PARAMS if p[0] != "REVIEWBOARD_DIFF_REVISION"]

        ok = PatchStep().perform(params, client, executor, listener)

        assert ok is False
        assert listener.contains(MISSING_PARAMETERS_MESSAGE)
        executor.run.assert_not_called()
        client.update_status_update.assert_not_called()

    def test_invalid_url_fails_build(self):
        listener = BuildListener()
        params = PARAMS[1:] + [("REVIEWBOARD_SERVER", "nope")]

        assert PatchStep().perform(params, _mock_client(), _mock_executor(), listener) is False
        assert listener.contains("URL provided in REVIEWBOARD_SERVER is not a valid URL.")

    @pytest.mark.parametrize(
        "error, message",
        [
            (NoServerConfigurationsLoaded(), "No Review Board server configurations found."),
            (
                NoServerConfiguration("http://localhost"),
                "No Review Board server configuration found for server URL 'http://localhost'.",
            ),
        ],
    )
    def test_missing_server_configuration_fails_build(self, error, message):
        client = _mock_client()
        client.resolve_server.side_effect = error
        executor = _mock_executor()
        listener = BuildListener()

        assert PatchStep().perform(PARAMS, client, executor, listener) is False
        assert listener.contains(message)
        executor.run.assert_not_called()

    def test_install_failure_stops_before_patch(self):
        client = _mock_client()
        executor = _mock_executor(1)
        listener = BuildListener()

        ok = PatchStep().perform(PARAMS, client, executor, listener)

        assert ok is False
        assert executor.run.call_count == 1
        assert listener.contains("Command exited with code 1")
        client.update_status_update.assert_not_called()

    def test_patch_failure_fails_build_and_sends_nothing(self):
        client = _mock_client()
        executor = _mock_executor(0, 2)
        listener = BuildListener()

        ok = PatchStep().perform(PARAMS, client, executor, listener)

        assert ok is False
        assert listener.contains("Command exited with code 2")
        assert not listener.contains("secret-token")
        client.update_status_update.assert_not_called()

    def test_pending_notification_failure_is_not_fatal(self):
        client = _mock_client()
        client.update_status_update.side_effect = Unauthorized("bad token")
        listener = BuildListener()

        ok = PatchStep().perform(PARAMS, client, _mock_executor(), listener)

        assert ok is True
        assert listener.contains("Unable to notify Review Board of the build: bad token")


def test_unrunnable_command_fails_build(mocker):
    mocker.patch(
        "rbstatus_core.process.subprocess.run",
        side_effect=PermissionError(13, "Permission denied", "/opt/rbt"),
    )
    client = _mock_client()
    listener = BuildListener()
    step = PatchStep(install_rbtools=False, rbt_command="/opt/rbt")

    ok = step.perform(PARAMS, client, ProcessExecutor(listener), listener)

    assert ok is False
    assert listener.contains("Unable to run /opt/rbt")
    assert listener.contains("Command exited with code 126")
    assert not listener.contains("secret-token")
    client.update_status_update.assert_not_called()

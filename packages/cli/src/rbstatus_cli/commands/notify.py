"""notify command — post-build step reporting the build result to Review Board."""

from __future__ import annotations

import click

from rbstatus_cli.listener import ConsoleListener
from rbstatus_cli.params import collect_parameters, make_client, param_option
from rbstatus_core.notifier import notify_build_result
from rbstatus_core.outcome import BuildResult


@click.command("notify")
@click.option(
    "--result",
    default=None,
    envvar="BUILD_RESULT",
    help=(
        "Terminal result of the build: " + ", ".join(r.value for r in BuildResult) + ". "
        "Missing or unrecognized values are reported as a failed job."
    ),
)
@param_option
@click.pass_context
def notify_cmd(ctx, result: str | None, params: list[tuple[str, str]]):
    """Update the triggering review request's status update with the build result.

    Always exits 0: a failed notification is reported but never fails the build.

    \b
    Build parameters (environment or --param):
      REVIEWBOARD_SERVER            Review Board server URL
      REVIEWBOARD_REVIEW_ID         Review request ID
      REVIEWBOARD_STATUS_UPDATE_ID  Status update ID
    """
    listener = ConsoleListener()
    notify_build_result(
        collect_parameters(params),
        result,
        client=make_client(ctx),
        listener=listener,
    )

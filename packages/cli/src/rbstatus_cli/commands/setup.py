"""setup command — pre-build step applying the review request's diff."""

from __future__ import annotations

import os

import click

from rbstatus_cli.listener import ConsoleListener
from rbstatus_cli.params import collect_parameters, make_client, param_option
from rbstatus_core.patcher import PatchStep
from rbstatus_core.process import ProcessExecutor


@click.command("setup")
@click.option("--download-only", is_flag=True, help="Write the diff to patch.diff instead of applying it.")
@click.option(
    "--install-rbtools/--no-install-rbtools",
    default=True,
    show_default=True,
    help="Install rbtools before patching.",
)
@click.option(
    "--build-url",
    default=None,
    envvar="BUILD_URL",
    help="Link shown on the status update. Defaults to $BUILD_URL.",
)
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, exists=True),
    default=None,
    help="Directory to apply the patch in. Defaults to the current directory.",
)
@param_option
@click.pass_context
def setup_cmd(
    ctx,
    download_only: bool,
    install_rbtools: bool,
    build_url: str | None,
    workspace: str | None,
    params: list[tuple[str, str]],
):
    """Install rbtools, apply the review request's diff and mark the build pending.

    Exits 1 when the patch cannot be applied so the CI build fails.

    \b
    Build parameters (environment or --param):
      REVIEWBOARD_SERVER            Review Board server URL
      REVIEWBOARD_REVIEW_ID         Review request ID
      REVIEWBOARD_DIFF_REVISION     Diff revision to apply
      REVIEWBOARD_STATUS_UPDATE_ID  Status update ID
    """
    config = ctx.obj["config"]
    listener = ConsoleListener()
    step = PatchStep(
        download_only=download_only,
        install_rbtools=install_rbtools,
        install_command=config["install_command"],
        rbt_command=config["rbt_command"],
    )

    ok = step.perform(
        collect_parameters(params),
        client=make_client(ctx),
        executor=ProcessExecutor(listener),
        listener=listener,
        workspace=workspace or os.getcwd(),
        env=dict(os.environ),
        build_url=build_url,
    )
    if not ok:
        ctx.exit(1)

"""Pre-build step: apply the review request's diff with rbt and mark the build pending.

Unlike the notifier, failures here fail the build: without the patch there
is nothing meaningful to build. Only the final "pending" notification is
best-effort.
"""

from __future__ import annotations

import logging
import shlex
from typing import TYPE_CHECKING, Iterable, Mapping

from rbstatus_core.errors import (
    ExternalProcessFailed,
    IncompleteDescriptor,
    InvalidServerURL,
    ReviewBoardError,
)
from rbstatus_core.process import mask_command
from rbstatus_core.review_request import StatusUpdateState, parse_review_request

if TYPE_CHECKING:
    from rbstatus_core.client import StatusUpdateClient
    from rbstatus_core.listener import BuildListener
    from rbstatus_core.process import ProcessExecutor
    from rbstatus_core.registry import ServerConfiguration
    from rbstatus_core.review_request import ReviewRequest

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_COMMAND = "pip install --user rbtools"
DEFAULT_RBT_COMMAND = "rbt"
DOWNLOAD_ONLY_FILE = "patch.diff"

INVALID_URL_MESSAGE = "URL provided in REVIEWBOARD_SERVER is not a valid URL."
MISSING_PARAMETERS_MESSAGE = (
    "REVIEWBOARD_REVIEW_ID, REVIEWBOARD_DIFF_REVISION or "
    "REVIEWBOARD_STATUS_UPDATE_ID, or REVIEWBOARD_SERVER not provided in parameters"
)

PENDING_DESCRIPTION = "build running"
BUILD_LINK_TEXT = "See build"

# Position of the API token in the rbt patch command line.
_TOKEN_INDEX = 3


class PatchStep:
    """Installs rbtools, applies the review request's diff, then marks the status update pending.

    Args:
        download_only: Write the diff to ``patch.diff`` instead of applying it.
        install_rbtools: Run ``install_command`` before patching.
        install_command: Command line that installs rbtools.
        rbt_command: The rbt executable.
    """

    def __init__(
        self,
        download_only: bool = False,
        install_rbtools: bool = True,
        install_command: str = DEFAULT_INSTALL_COMMAND,
        rbt_command: str = DEFAULT_RBT_COMMAND,
    ):
        self.download_only = download_only
        self.install_rbtools = install_rbtools
        self.install_command = install_command
        self.rbt_command = rbt_command

    def build_commands(
        self, review_request: ReviewRequest, config: ServerConfiguration, token: str
    ) -> list[tuple[list[str], list[bool]]]:
        """Return ``(args, masks)`` pairs to run, in order."""
        patch_args = [
            self.rbt_command,
            "patch",
            "--api-token",
            token,
            "--server",
            config.server_url,
            "--diff-revision",
            str(review_request.revision),
        ]
        if self.download_only:
            patch_args += ["--write", DOWNLOAD_ONLY_FILE]
        patch_args.append(str(review_request.review_id))

        patch_masks = [False] * len(patch_args)
        patch_masks[_TOKEN_INDEX] = True

        commands = []
        if self.install_rbtools:
            install_args = shlex.split(self.install_command)
            commands.append((install_args, [False] * len(install_args)))
        commands.append((patch_args, patch_masks))
        return commands

    def perform(
        self,
        parameters: Iterable[tuple[str, str]],
        client: StatusUpdateClient,
        executor: ProcessExecutor,
        listener: BuildListener,
        workspace: str | None = None,
        env: Mapping[str, str] | None = None,
        build_url: str | None = None,
    ) -> bool:
        """Run the step. Returns False when the build must be marked failed."""
        try:
            review_request = self._prepare(parameters)
            config = client.resolve_server(review_request)
        except InvalidServerURL:
            listener.error(INVALID_URL_MESSAGE)
            return False
        except ReviewBoardError as e:
            listener.error(str(e))
            return False

        token = client.api_token(config)
        logger.debug(
            "Applying diff revision %d of review request %d from %s",
            review_request.revision,
            review_request.review_id,
            config.server_url,
        )

        try:
            for args, masks in self.build_commands(review_request, config, token):
                exit_code = executor.run(args, masks=masks, cwd=workspace, env=env)
                if exit_code != 0:
                    raise ExternalProcessFailed(exit_code, mask_command(args, masks))
        except ExternalProcessFailed as e:
            listener.error(str(e))
            return False

        try:
            client.update_status_update(
                review_request,
                StatusUpdateState.PENDING,
                PENDING_DESCRIPTION,
                build_url,
                BUILD_LINK_TEXT if build_url is not None else None,
            )
        except ReviewBoardError as e:
            listener.error(f"Unable to notify Review Board of the build: {e}")

        return True

    @staticmethod
    def _prepare(parameters: Iterable[tuple[str, str]]) -> ReviewRequest:
        review_request = parse_review_request(parameters)
        if not review_request.is_complete_for_patch():
            raise IncompleteDescriptor(MISSING_PARAMETERS_MESSAGE)
        return review_request

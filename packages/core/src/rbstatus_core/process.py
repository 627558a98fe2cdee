"""Run external commands for a build step with secrets masked from the log."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import TYPE_CHECKING, Mapping, Sequence

if TYPE_CHECKING:
    from rbstatus_core.listener import BuildListener

logger = logging.getLogger(__name__)

MASK = "********"

# Conventional shell exit statuses.
COMMAND_NOT_FOUND = 127
COMMAND_NOT_RUNNABLE = 126


def mask_command(args: Sequence[str], masks: Sequence[bool] | None = None) -> str:
    """Render a command for display, replacing masked arguments with ``********``."""
    masks = masks or ()
    return " ".join(MASK if i < len(masks) and masks[i] else arg for i, arg in enumerate(args))


class ProcessExecutor:
    """Runs a command to completion, then writes its captured output to a listener.

    Output is buffered until the process exits. Arguments flagged in
    ``masks`` are hidden in the echoed command, and every occurrence of their
    values, including inside longer words, is replaced by ``********`` in the
    captured output. Undecodable bytes in the output are replaced, not fatal.
    """

    def __init__(self, listener: BuildListener):
        self.listener = listener

    def run(
        self,
        args: Sequence[str],
        masks: Sequence[bool] | None = None,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Run ``args`` and return its exit code."""
        args = [str(a) for a in args]
        masks = list(masks or [])
        secrets = [arg for i, arg in enumerate(args) if i < len(masks) and masks[i] and arg]

        self.listener.info(f"$ {mask_command(args, masks)}")

        run_env = None
        if env is not None:
            run_env = {**os.environ, **env}

        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env=run_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            if isinstance(e, FileNotFoundError) and e.filename == args[0]:
                self.listener.error(f"Command not found: {args[0]}")
                return COMMAND_NOT_FOUND
            self.listener.error(f"Unable to run {args[0]}: {e}")
            return COMMAND_NOT_RUNNABLE

        for line in (result.stdout or "").splitlines():
            for secret in secrets:
                line = line.replace(secret, MASK)
            self.listener.info(line)

        logger.debug("%s exited with %d", args[0], result.returncode)
        return result.returncode

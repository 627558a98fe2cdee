"""Error taxonomy for talking to a Review Board server.

Every failure raised by rbstatus_core derives from ReviewBoardError and
carries a human-readable message, so orchestrators can catch one type at
their boundary and report ``str(exc)`` to the build log.
"""

from __future__ import annotations


class ReviewBoardError(Exception):
    """Raised when an error occurs while communicating with a Review Board server."""


class InvalidServerURL(ReviewBoardError):
    """REVIEWBOARD_SERVER (or a configured server URL) is not a valid URL."""


class MalformedParameter(ReviewBoardError):
    """A numeric build parameter could not be parsed as an integer."""

    def __init__(self, name: str, value: str):
        super().__init__(f"{name} must be an integer, got {value!r}")
        self.name = name
        self.value = value


class IncompleteDescriptor(ReviewBoardError):
    """One or more required REVIEWBOARD_* parameters were not provided."""


class NoServerConfigurationsLoaded(ReviewBoardError):
    def __init__(self):
        super().__init__("No Review Board server configurations found.")


class NoServerConfiguration(ReviewBoardError):
    def __init__(self, server_url: str):
        super().__init__(f"No Review Board server configuration found for server URL '{server_url}'.")
        self.server_url = server_url


class ServerUnreachable(ReviewBoardError):
    """The request failed before a usable response arrived."""


class ResourceNotFound(ReviewBoardError):
    pass


class Forbidden(ReviewBoardError):
    pass


class Unauthorized(ReviewBoardError):
    pass


class UnexpectedResponse(ReviewBoardError):
    def __init__(self, status_code: int):
        super().__init__(f"Unhandled response code from Review Board: {status_code}")
        self.status_code = status_code


class ExternalProcessFailed(ReviewBoardError):
    def __init__(self, exit_code: int, command: str = ""):
        msg = f"Command exited with code {exit_code}"
        if command:
            msg += f": {command}"
        super().__init__(msg)
        self.exit_code = exit_code
        self.command = command

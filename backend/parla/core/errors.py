# parla/core/errors.py
"""
Error taxonomy for the coaching pipeline.

Each kind maps to one HTTP status at the request boundary (see main.py) so
callers can tell "bad input" from "not found" from "upstream failure".
The public message is generic; the internal detail stays in the logs.
"""


class ParlaError(Exception):
    """Base class for pipeline errors."""

    status_code = 500
    code = "INTERNAL_ERROR"
    public_message = "Request failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)


class InvalidInputError(ParlaError):
    """Missing transcript, malformed request body, unsupported setting."""

    status_code = 400
    code = "BAD_REQUEST"
    public_message = "Invalid request"

    def __init__(self, message: str = ""):
        super().__init__(message)
        # Input errors are safe to echo back
        if message:
            self.public_message = message


class NotFoundError(ParlaError):
    """Row missing, or owned by another user."""

    status_code = 404
    code = "NOT_FOUND"
    public_message = "Not found"


class UpstreamError(ParlaError):
    """An AI provider call failed (network, HTTP status, empty reply)."""

    status_code = 502
    code = "UPSTREAM_FAILED"
    public_message = "Upstream service failed"


class MalformedResponseError(ParlaError):
    """A provider replied, but not in the shape we asked for."""

    status_code = 502
    code = "MALFORMED_RESPONSE"
    public_message = "Upstream service returned an invalid response"

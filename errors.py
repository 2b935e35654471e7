"""Typed errors shared by the credential, OAuth, provider and protocol layers."""

from typing import Optional


class GatewayError(Exception):
    """Base class for gateway errors

    Attributes:
        message: Human-readable message, safe to show to the caller
        status_code: HTTP status used when the error reaches a REST route
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(GatewayError):
    """Malformed caller input (missing code or session id)"""

    status_code = 400


class NotFound(GatewayError):
    """Referenced pending code, session or workspace is unknown"""

    status_code = 404


class UpstreamError(GatewayError):
    """A GitHub or ClickUp call failed

    The upstream body is kept for server-side logging only; callers see
    ``message``.
    """

    status_code = 502
    retryable = False

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body

    def __str__(self) -> str:
        if self.upstream_status is not None:
            return f"{self.message} (upstream status {self.upstream_status})"
        return self.message


class UpstreamTimeout(UpstreamError):
    """An outbound call exceeded its timeout; safe to retry"""

    status_code = 504
    retryable = True


class InternalError(GatewayError):
    """Invariant violation, e.g. a tool invoked without a session id"""

    status_code = 500

"""
Exception types raised by the portal services.

Route handlers either catch these at the call site or let them reach the
application-level handler, which renders the standard error envelope.
"""

from typing import Any, Dict, Optional


class PortalException(Exception):
    """Base exception carrying a client-safe message."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationFailed(PortalException):
    """Missing or malformed request input."""

    status_code = 400


class NotFound(PortalException):
    status_code = 404


class MovewareError(PortalException):
    """
    The Moveware API could not be reached or answered with a non-2xx status.

    upstream_status is 0 for transport failures.
    """

    status_code = 500

    def __init__(self, message: str, upstream_status: int = 0, url: str = "", body: str = ""):
        super().__init__(message, {"upstream_status": upstream_status, "url": url})
        self.upstream_status = upstream_status
        self.url = url
        self.body = body[:300]


class Unauthorized(PortalException):
    status_code = 401

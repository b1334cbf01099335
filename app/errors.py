"""
Error types for the gateway.

GatewayError subclasses map one-to-one onto HTTP responses; the handler in
app.main renders them as {"message": ...}. Upstream* errors are raised by the
analytics client and translated by the routes.
"""
from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base error carrying the HTTP status returned to the caller."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {"message": self.message}
        if self.error is not None:
            result["error"] = self.error
        return result


class BadRequestError(GatewayError):
    """Malformed body or missing query parameter."""
    status_code = 400


class NotFoundError(GatewayError):
    """Requested game does not exist."""
    status_code = 404


class ServiceUnavailableError(GatewayError):
    """Analytics service could not be reached."""
    status_code = 503


class InternalError(GatewayError):
    """Upstream response could not be read or parsed."""
    status_code = 500


# ===== UPSTREAM (analytics client) =====

class UpstreamError(Exception):
    """Base for failures talking to the analytics service."""


class UpstreamUnavailableError(UpstreamError):
    """Connection refused, DNS failure, timeout."""


class UpstreamReadError(UpstreamError):
    """Response body could not be read."""


class UpstreamParseError(UpstreamError):
    """Response body is not the expected JSON shape."""

"""
Error types for the YaYa transactions proxy.

ApiError and its subclasses are raised by the validator, the retry policy
and the normalizer, and are rendered by the handlers in app.py as
``{"error": message}`` with the carried status code.

UpstreamCallError / InvalidJSONResponse are raised by the wallet clients
only; WalletRetryPolicy converts them before they reach the HTTP boundary.
"""

from typing import Any, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


class ApiError(Exception):
    status: int = 500

    def __init__(self, message: str, status: Optional[int] = None, is_operational: bool = True):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.is_operational = is_operational

    def public_message(self) -> str:
        """Message that is safe to return to the caller."""
        return self.message

    def details(self) -> dict:
        return {"status": self.status, "isOperational": self.is_operational}


class ValidationError(ApiError):
    status = 400


class NotFoundError(ApiError):
    status = 404


class BadUpstreamResponse(ApiError):
    """
    Upstream answered with non-JSON or with a payload that breaks the
    expected contract. ``diagnostic`` holds the raw/truncated payload and is
    logged, never returned to the caller.
    """

    status = 500

    def __init__(self, message: str, diagnostic: Optional[str] = None):
        super().__init__(message)
        self.diagnostic = diagnostic

    def public_message(self) -> str:
        return "Invalid response from YaYa API"


class UpstreamError(ApiError):
    """Upstream call failed after exhausting retries."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, status=status or 500)


# -----------------------
# Client-layer errors
# -----------------------
class UpstreamCallError(Exception):
    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401 or "401" in (self.message or "")


class InvalidJSONResponse(UpstreamCallError):
    def __init__(self, body: Any, status: Optional[int] = None):
        text = body if isinstance(body, str) else repr(body)
        super().__init__(f"invalid json response body: {text[:200]}", status=status, body=text)

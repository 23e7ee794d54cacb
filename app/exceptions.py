from typing import Any, Mapping, Optional


class NidusError(Exception):
    """Base class for every error raised by the client and the sandbox.

    Attributes:
        message: human-readable message, shown to the user as is
        details: optional mapping with extra context (field errors, response body)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


# ============================================================================
# Transport errors raised by the HTTP adapter
# ============================================================================


class APIError(NidusError):
    """Base class for failures talking to the ordering API."""

    default_message = "API request failed"


class InvalidURLError(APIError):
    """Raised when the base URL and endpoint do not form a valid http(s) URL."""

    http_status = 400
    default_message = "Invalid URL"


class RequestFailedError(APIError):
    """Raised when the request never produced a response (DNS, connect, timeout).

    The underlying httpx exception is available as ``cause``.
    """

    http_status = 503
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None, **kwargs):
        super().__init__(message or f"Request failed: {cause}", **kwargs)
        self.cause = cause


class InvalidResponseError(APIError):
    """Raised when the server answered with something the client cannot use."""

    http_status = 502
    default_message = "Invalid response from server"


class DecodingFailedError(APIError):
    """Raised when a successful response body does not match the expected model."""

    http_status = 502
    default_message = "Failed to decode response"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None, **kwargs):
        super().__init__(message or f"Failed to decode response: {cause}", **kwargs)
        self.cause = cause


class UnauthorizedError(APIError):
    """Raised on HTTP 401 or when an authenticated call has no stored token.

    http_status is 401.
    """

    http_status = 401
    default_message = "Authorization required"


class ServerError(APIError):
    """Raised for any non-2xx status other than 401.

    Attributes:
        status_code: HTTP status returned by the server
        server_message: message parsed from the error body, if any
    """

    def __init__(self, status_code: int, server_message: Optional[str] = None, **kwargs):
        self.status_code = status_code
        self.server_message = server_message
        super().__init__(server_message or f"Server error ({status_code})", **kwargs)
        self.http_status = status_code

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["status_code"] = self.status_code
        return payload


# ============================================================================
# Service errors
# ============================================================================


class ServiceValidationError(NidusError):
    """Raised when input data is invalid or a precondition for a service call is not met.

    http_status is 400.
    """

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(NidusError):
    """Raised when a requested resource was not found.

    http_status is 404.
    """

    http_status = 404
    default_message = "Not found"


class ConflictError(NidusError):
    """Raised when a resource conflict occurs (e.g., duplicate entry).

    http_status is 409.
    """

    http_status = 409
    default_message = "Conflict"


class CartConflictError(ConflictError):
    """Raised when an item from another coffee shop is added to a non-empty cart."""

    default_message = "Cart already contains items from another coffee shop"


class PermissionDeniedError(NidusError):
    """Raised when the signed-in user lacks the role an operation needs.

    http_status is 403.
    """

    http_status = 403
    default_message = "You don't have permission to perform this action"

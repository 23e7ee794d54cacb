"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    NidusError,
    APIError,
    InvalidURLError,
    RequestFailedError,
    InvalidResponseError,
    DecodingFailedError,
    UnauthorizedError,
    ServerError,
    ServiceValidationError,
    NotFoundError,
    ConflictError,
    CartConflictError,
    PermissionDeniedError,
)

__all__ = [
    "settings",
    "NidusError",
    "APIError",
    "InvalidURLError",
    "RequestFailedError",
    "InvalidResponseError",
    "DecodingFailedError",
    "UnauthorizedError",
    "ServerError",
    "ServiceValidationError",
    "NotFoundError",
    "ConflictError",
    "CartConflictError",
    "PermissionDeniedError",
]

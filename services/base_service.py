"""
Base service for screen-facing business logic.

Services orchestrate repositories and keep the state a screen renders:
a loading flag, the last error as a human-readable string and an optional
success message.
"""

from contextlib import contextmanager
from typing import Optional
import logging

from app.exceptions import NidusError, ServerError, UnauthorizedError

UNKNOWN_SERVER_ERROR = "Unknown server error"
AUTHORIZATION_REQUIRED = "Authorization required"


def describe_error(exc: BaseException) -> str:
    """Turn an exception into the message shown to the user"""
    if isinstance(exc, ServerError):
        return exc.server_message or UNKNOWN_SERVER_ERROR
    if isinstance(exc, UnauthorizedError):
        return AUTHORIZATION_REQUIRED
    if isinstance(exc, NidusError):
        return exc.message
    return str(exc)


class BaseService:
    """
    Base service providing logging helpers and screen state.
    All stateful services should inherit from this class.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)
        self.is_loading = False
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"{message} {extra_data}".strip())

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.warning(f"{message} {extra_data}".strip())

    def fail(self, message: str) -> bool:
        """Record an error without an exception; always returns False"""
        self.error = message
        self.log_warning(message)
        return False

    @contextmanager
    def operation(self, name: str):
        """
        Run one user-triggered operation.

        Clears the previous error, toggles is_loading and records any NidusError
        as a display string instead of letting it escape to the caller.
        """
        self.is_loading = True
        self.error = None
        try:
            yield
        except NidusError as exc:
            self.error = describe_error(exc)
            self.log_warning(f"{name} failed", error=exc.__class__.__name__, reason=self.error)
        finally:
            self.is_loading = False

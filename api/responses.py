"""
Response helpers for the sandbox API.
Error bodies follow the backend envelope the client parses.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from domain.schemas.base import APIModel, utcnow


class ErrorResponse(BaseModel):
    """Standardized error response"""

    message: Union[str, List[str]] = Field(..., description="Error message or list of messages")
    error: str = Field(..., description="HTTP reason phrase")
    statusCode: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")


def error_response(status_code: int, message: Union[str, List[str]], error: str) -> dict:
    """Create a standardized error response"""
    return ErrorResponse(message=message, error=error, statusCode=status_code).model_dump()


def dump(model: APIModel) -> dict:
    """camelCase JSON body of a model"""
    return model.to_payload(exclude_none=False)


def dump_all(models: Iterable[APIModel]) -> List[dict]:
    return [dump(m) for m in models]


def paginate(items: List[Any], limit: Optional[int], page: int) -> List[Any]:
    """Slice a newest-first list; no limit returns everything"""
    if not limit:
        return items
    start = (max(page, 1) - 1) * limit
    return items[start:start + limit]

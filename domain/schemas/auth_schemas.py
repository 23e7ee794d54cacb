from typing import Optional

from pydantic import BaseModel, Field

from domain.schemas.base import APIModel
from domain.schemas.user_schemas import User


class Credentials(APIModel):
    email: str
    password: str


class TokenPair(BaseModel):
    """Tokens returned by /auth/login and /auth/refresh (snake_case on the wire)"""

    access_token: str
    refresh_token: str = ""


class RefreshRequest(APIModel):
    refresh_token: str


class RegisterResult(APIModel):
    """Response of POST /user/create"""

    user: User
    token: str


class MessageResponse(APIModel):
    message: Optional[str] = None


class UploadResponse(APIModel):
    """Response of the upload endpoints"""

    success: bool = True
    url: Optional[str] = None


class ImageUpload(BaseModel):
    """Encoded image ready for multipart upload"""

    data: bytes
    file_name: str = "image.jpg"
    mime_type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.data)


class ErrorBody(BaseModel):
    """Error envelope sent by the API on non-2xx responses"""

    message: Optional[str | list[str]] = None
    error: Optional[str] = None
    status_code: Optional[int] = Field(default=None, alias="statusCode")

    @property
    def text(self) -> Optional[str]:
        if isinstance(self.message, list):
            return ", ".join(self.message)
        return self.message or self.error

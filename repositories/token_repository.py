"""
Token Repository - persisted access and refresh tokens
"""

from typing import Optional
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import AuthToken

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


class TokenRepository(BaseRepository[AuthToken]):
    """Stores named tokens; doubles as the HTTP adapter's token store"""

    def __init__(self, db: Session):
        super().__init__(db, AuthToken)

    def get(self, name: str) -> Optional[str]:
        row = self.get_by_id(name)
        return row.value if row else None

    def set(self, name: str, value: str) -> None:
        row = self.get_by_id(name)
        if row is None:
            self.create(AuthToken(name=name, value=value))
        else:
            row.value = value
            self.update(row)

    def clear(self) -> None:
        self.db.query(AuthToken).delete()
        self.db.commit()

    @property
    def access_token(self) -> Optional[str]:
        return self.get(ACCESS_TOKEN_KEY)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.get(REFRESH_TOKEN_KEY)

    def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self.set(ACCESS_TOKEN_KEY, access_token)
        self.set(REFRESH_TOKEN_KEY, refresh_token)

    def clear_tokens(self) -> None:
        self.delete(ACCESS_TOKEN_KEY)
        self.delete(REFRESH_TOKEN_KEY)

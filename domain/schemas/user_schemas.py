from typing import Optional, List

from pydantic import BaseModel, Field

from domain.enums import RoleName
from domain.schemas.base import APIModel, ApiDateTime, utcnow


class Role(APIModel):
    """Role attached to a user; two roles are equal when their ids match"""

    id: str
    name: str
    description: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class User(APIModel):
    """Authenticated user profile"""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    roles: Optional[List[Role]] = None

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        if self.first_name:
            return self.first_name
        if self.last_name:
            return self.last_name
        return self.email

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles or []]

    def has_role(self, name: str | RoleName) -> bool:
        value = name.value if isinstance(name, RoleName) else name
        return value in self.role_names


class UserRoles(APIModel):
    """Response of GET /user/{id}/role"""

    id: str
    email: str
    roles: List[Role] = Field(default_factory=list)


class UserWithRoles(BaseModel):
    """User row on the admin screen, with roles resolved separately"""

    user: User
    roles: List[Role] = Field(default_factory=list)

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]


class ProfileUpdate(APIModel):
    """Body of PATCH /user/profile; empty strings are sent as null"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_form(cls, first_name: str = "", last_name: str = "", phone: str = "") -> "ProfileUpdate":
        return cls(
            first_name=first_name.strip() or None,
            last_name=last_name.strip() or None,
            phone=phone.strip() or None,
        )


class RoleUpdate(APIModel):
    roles: List[str]

"""
User Repository - profile and administrative user management
"""

from typing import List, Optional

from repositories.base import ApiRepository
from domain.schemas.user_schemas import ProfileUpdate, RoleUpdate, User, UserRoles


class UserRepository(ApiRepository):
    def get_profile(self) -> User:
        return self.api.fetch("/user/profile", User)

    def update_profile(self, first_name: Optional[str] = None, last_name: Optional[str] = None, phone: Optional[str] = None) -> User:
        """Empty strings are sent as null so the server clears the field"""
        update = ProfileUpdate(
            first_name=first_name or None,
            last_name=last_name or None,
            phone=phone or None,
        )
        return self.api.patch("/user/profile", update.to_payload(exclude_none=False), User)

    def get_users(self) -> List[User]:
        return self.api.fetch("/user/find-all", List[User])

    def search_by_email(self, email: str) -> List[User]:
        return self.api.fetch("/user/search", List[User], params={"email": email})

    def get_user_roles(self, user_id: str) -> UserRoles:
        return self.api.fetch(f"/user/{user_id}/role", UserRoles)

    def update_roles(self, user_id: str, roles: List[str]) -> User:
        return self.api.patch(f"/user/{user_id}/role", RoleUpdate(roles=roles), User)

    def delete_user(self, user_id: str) -> None:
        self.api.delete_without_response(f"/user/{user_id}")

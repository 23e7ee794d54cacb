"""
User administration for super admins.
"""

from typing import List, Optional

from app.exceptions import APIError
from domain.schemas.user_schemas import User, UserWithRoles
from repositories import UserRepository
from services import roles
from services.base_service import BaseService


class AdminService(BaseService):
    def __init__(self, repository: UserRepository, current_user: Optional[User] = None):
        super().__init__("nidus.admin")
        self.repository = repository
        self.current_user = current_user
        self.users: List[UserWithRoles] = []

    def _check_admin(self) -> bool:
        if not roles.is_super_admin(self.current_user):
            return self.fail("Only administrators can manage users")
        return True

    def _with_roles(self, user: User) -> UserWithRoles:
        """Attach roles, fetching them when the list payload omits them"""
        if user.roles is not None:
            return UserWithRoles(user=user, roles=user.roles)
        try:
            return UserWithRoles(user=user, roles=self.repository.get_user_roles(user.id).roles)
        except APIError as exc:
            self.log_warning("Could not load roles", user_id=user.id, error=exc)
            return UserWithRoles(user=user)

    def load_users(self) -> bool:
        if not self._check_admin():
            return False
        with self.operation("load_users"):
            self.users = [self._with_roles(u) for u in self.repository.get_users()]
            return True
        return False

    def search_by_email(self, email: str) -> List[UserWithRoles]:
        if not self._check_admin():
            return []
        if not email.strip():
            return self.users if self.load_users() else []
        with self.operation("search_users"):
            return [self._with_roles(u) for u in self.repository.search_by_email(email.strip())]
        return []

    def update_roles(self, user_id: str, role_names: List[str]) -> Optional[User]:
        if not self._check_admin():
            return None
        with self.operation("update_roles"):
            user = self.repository.update_roles(user_id, role_names)
            self.users = [
                self._with_roles(user) if entry.user.id == user_id else entry
                for entry in self.users
            ]
            self.success_message = f"Roles of {user.full_name} updated"
            return user
        return None

    def delete_user(self, user_id: str) -> bool:
        if not self._check_admin():
            return False
        if self.current_user and self.current_user.id == user_id:
            return self.fail("You cannot delete your own account here")
        with self.operation("delete_user"):
            self.repository.delete_user(user_id)
            self.users = [entry for entry in self.users if entry.user.id != user_id]
            self.success_message = "User deleted"
            return True
        return False

"""
Personal information and avatar of the signed-in user.
"""

from typing import Optional

from domain.schemas.auth_schemas import ImageUpload
from domain.schemas.user_schemas import User
from repositories import UploadRepository, UserRepository
from services.base_service import BaseService


class ProfileService(BaseService):
    def __init__(self, user_repository: UserRepository, upload_repository: Optional[UploadRepository] = None):
        super().__init__("nidus.profile")
        self.user_repository = user_repository
        self.upload_repository = upload_repository or UploadRepository(user_repository.api)
        self.user: Optional[User] = None

    def load(self) -> Optional[User]:
        with self.operation("load_profile"):
            self.user = self.user_repository.get_profile()
            return self.user
        return None

    def update(self, first_name: str = "", last_name: str = "", phone: str = "") -> Optional[User]:
        """Save the form; blank fields are cleared on the server"""
        with self.operation("update_profile"):
            self.user = self.user_repository.update_profile(
                first_name.strip(), last_name.strip(), phone.strip()
            )
            self.success_message = "Profile updated"
            return self.user
        return None

    def upload_avatar(self, image: ImageUpload) -> Optional[str]:
        with self.operation("upload_avatar"):
            result = self.upload_repository.upload_avatar(image)
            if self.user is not None and result.url:
                self.user = self.user.model_copy(update={"avatar_url": result.url})
            return result.url
        return None

    def delete_avatar(self) -> bool:
        with self.operation("delete_avatar"):
            self.upload_repository.delete_avatar()
            if self.user is not None:
                self.user = self.user.model_copy(update={"avatar_url": None})
            return True
        return False

"""
Upload Repository - avatar, logo and menu image uploads
"""

from app.config import settings
from app.exceptions import ServiceValidationError
from repositories.base import ApiRepository
from domain.schemas.auth_schemas import ImageUpload, UploadResponse


class UploadRepository(ApiRepository):
    @staticmethod
    def _check_size(image: ImageUpload) -> None:
        if image.size > settings.max_upload_bytes:
            raise ServiceValidationError(
                "Image is too large",
                details={"size": image.size, "max_size": settings.max_upload_bytes},
                code="IMAGE_TOO_LARGE",
            )

    def upload_avatar(self, image: ImageUpload) -> UploadResponse:
        self._check_size(image)
        avatar = image.model_copy(update={"file_name": "avatar.jpg"})
        return self.api.upload("/upload/user/avatar", avatar, UploadResponse)

    def delete_avatar(self) -> UploadResponse:
        return self.api.delete("/upload/user/avatar", UploadResponse)

    def upload_coffee_shop_logo(self, coffee_shop_id: str, image: ImageUpload) -> UploadResponse:
        self._check_size(image)
        return self.api.upload(f"/upload/coffee-shop/{coffee_shop_id}/logo", image, UploadResponse)

    def upload_menu_item_image(self, menu_item_id: str, image: ImageUpload) -> UploadResponse:
        self._check_size(image)
        return self.api.upload(f"/upload/menu-item/{menu_item_id}/image", image, UploadResponse)

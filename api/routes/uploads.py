"""Image upload routes"""

from fastapi import APIRouter, Depends, File, UploadFile
import logging

from api.dependencies import get_current_user, get_store
from api.store import SandboxStore
from app.config import settings
from app.exceptions import ServiceValidationError
from domain.schemas.auth_schemas import UploadResponse
from domain.schemas.user_schemas import User

router = APIRouter(prefix="/upload", tags=["Uploads"])
logger = logging.getLogger("nidus.sandbox.uploads")

CDN_URL = "https://cdn.sandbox.nidus.test"


def _read_image(file: UploadFile) -> bytes:
    if not (file.content_type or "").startswith("image/"):
        raise ServiceValidationError("Only image files are allowed")
    data = file.file.read()
    if not data:
        raise ServiceValidationError("File is empty")
    if len(data) > settings.max_upload_bytes:
        raise ServiceValidationError("File is too large")
    return data


def _stored(kind: str, owner_id: str, file: UploadFile) -> str:
    data = _read_image(file)
    url = f"{CDN_URL}/{kind}/{owner_id}/{file.filename or 'image.jpg'}"
    logger.info("Stored %d bytes at %s", len(data), url)
    return url


@router.post("/user/avatar")
def upload_avatar(
    file: UploadFile = File(...),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(get_current_user),
):
    url = _stored("avatars", user.id, file)
    store.update_profile(user.id, {"avatar_url": url})
    return UploadResponse(url=url).to_payload()


@router.delete("/user/avatar")
def delete_avatar(store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    store.update_profile(user.id, {"avatar_url": None})
    return UploadResponse(url=None).to_payload(exclude_none=False)


@router.post("/coffee-shop/{coffee_shop_id}/logo")
def upload_logo(
    coffee_shop_id: str,
    file: UploadFile = File(...),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(get_current_user),
):
    shop = store.get_shop(coffee_shop_id)
    store.check_can_manage(user, shop)
    url = _stored("logos", shop.id, file)
    shop.logo_url = url
    return UploadResponse(url=url).to_payload()


@router.post("/menu-item/{menu_item_id}/image")
def upload_menu_item_image(
    menu_item_id: str,
    file: UploadFile = File(...),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(get_current_user),
):
    item = store.find_item(menu_item_id)
    store.check_can_manage(user, store.shop_of_item(item))
    url = _stored("menu-items", item.id, file)
    item.image_url = url
    return UploadResponse(url=url).to_payload()

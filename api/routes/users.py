"""Registration, profile and user administration routes"""

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import get_current_user, get_store, require_superadmin
from api.responses import dump, dump_all
from api.store import SandboxStore
from app.exceptions import ServiceValidationError
from domain.schemas.auth_schemas import Credentials
from domain.schemas.user_schemas import ProfileUpdate, RoleUpdate, User, UserRoles

router = APIRouter(prefix="/user", tags=["Users"])
logger = logging.getLogger("nidus.sandbox.users")

MIN_PASSWORD_LENGTH = 6


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_user(credentials: Credentials, store: SandboxStore = Depends(get_store)):
    """Register a customer account and sign it in"""
    errors = []
    if "@" not in credentials.email:
        errors.append("email must be an email")
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        errors.append(f"password must be longer than or equal to {MIN_PASSWORD_LENGTH} characters")
    if errors:
        raise ServiceValidationError(", ".join(errors))
    user = store.add_user(credentials.email, credentials.password)
    logger.info("Registered user %s", user.id)
    return {"user": dump(user), "token": store.access_token_for(user)}


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return dump(user)


@router.patch("/profile")
def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    store: SandboxStore = Depends(get_store),
):
    """Fields sent as null are cleared"""
    return dump(store.update_profile(user.id, body.model_dump(exclude_unset=True)))


@router.get("/find-all")
def find_all(store: SandboxStore = Depends(get_store), _: User = Depends(require_superadmin)):
    return dump_all(store.users.values())


@router.get("/search")
def search(
    email: str = Query(..., min_length=1),
    store: SandboxStore = Depends(get_store),
    _: User = Depends(require_superadmin),
):
    needle = email.strip().lower()
    return dump_all(u for u in store.users.values() if needle in u.email.lower())


@router.get("/{user_id}/role")
def get_roles(user_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(require_superadmin)):
    user = store.get_user(user_id)
    return dump(UserRoles(id=user.id, email=user.email, roles=user.roles or []))


@router.patch("/{user_id}/role")
def update_roles(
    user_id: str,
    body: RoleUpdate,
    store: SandboxStore = Depends(get_store),
    _: User = Depends(require_superadmin),
):
    return dump(store.set_roles(user_id, body.roles))


@router.delete("/{user_id}")
def delete_user(user_id: str, store: SandboxStore = Depends(get_store), admin: User = Depends(require_superadmin)):
    if user_id == admin.id:
        raise ServiceValidationError("You cannot delete your own account")
    store.delete_user(user_id)
    return {"message": "User deleted"}

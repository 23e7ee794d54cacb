"""
API dependencies for dependency injection
"""

from typing import Optional

from fastapi import Depends, Header, Request

from api.store import SandboxStore
from app.exceptions import PermissionDeniedError, UnauthorizedError
from domain.enums import RoleName
from domain.schemas.user_schemas import User


def get_store(request: Request) -> SandboxStore:
    """
    Sandbox store dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(store: SandboxStore = Depends(get_store)):
            # Use the store here
            pass
    """
    return request.app.state.store


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    store: SandboxStore = Depends(get_store),
) -> User:
    """Resolve the bearer token; 401 when it is missing or unknown"""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise UnauthorizedError()
    return store.user_for_token(authorization[7:].strip())


def require_superadmin(user: User = Depends(get_current_user)) -> User:
    if not user.has_role(RoleName.SUPERADMIN):
        raise PermissionDeniedError()
    return user


def require_manager(user: User = Depends(get_current_user)) -> User:
    """Super admin or coffee shop owner"""
    if not (user.has_role(RoleName.SUPERADMIN) or user.has_role(RoleName.COFFEE_SHOP_OWNER)):
        raise PermissionDeniedError()
    return user

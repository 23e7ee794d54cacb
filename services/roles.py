"""Role checks for administrative screens."""

from typing import Optional

from domain.enums import RoleName
from domain.schemas.coffee_shop_schemas import CoffeeShop
from domain.schemas.user_schemas import User


def is_super_admin(user: Optional[User]) -> bool:
    return bool(user and user.has_role(RoleName.SUPERADMIN))


def is_coffee_shop_owner(user: Optional[User]) -> bool:
    return bool(user and user.has_role(RoleName.COFFEE_SHOP_OWNER))


def can_manage_coffee_shops(user: Optional[User]) -> bool:
    return is_super_admin(user) or is_coffee_shop_owner(user)


def can_manage_coffee_shop(user: Optional[User], shop: CoffeeShop) -> bool:
    """Super admins manage every shop; owners only the shops they own"""
    if is_super_admin(user):
        return True
    if is_coffee_shop_owner(user) and shop.owner_id:
        return user.id == shop.owner_id
    return False

"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository, ApiRepository
from repositories.token_repository import TokenRepository
from repositories.cart_repository import CartRepository
from repositories.auth_repository import AuthRepository
from repositories.coffee_shop_repository import CoffeeShopRepository
from repositories.menu_group_repository import MenuGroupRepository
from repositories.menu_item_repository import MenuItemRepository
from repositories.order_repository import OrderRepository
from repositories.order_history_repository import OrderHistoryRepository
from repositories.payment_repository import PaymentRepository
from repositories.user_repository import UserRepository
from repositories.upload_repository import UploadRepository

__all__ = [
    "BaseRepository",
    "ApiRepository",
    "TokenRepository",
    "CartRepository",
    "AuthRepository",
    "CoffeeShopRepository",
    "MenuGroupRepository",
    "MenuItemRepository",
    "OrderRepository",
    "OrderHistoryRepository",
    "PaymentRepository",
    "UserRepository",
    "UploadRepository",
]

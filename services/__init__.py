"""Services package - Business logic layer"""

from services.base_service import BaseService, describe_error
from services.cache_service import (
    CoffeeShopCache,
    CustomizationNameCache,
    coffee_shop_cache,
    customization_name_cache,
)
from services.auth_service import AuthService
from services.cart_service import CartService
from services.customization_service import ItemCustomizer
from services.checkout_service import CheckoutService
from services.order_history_service import OrderHistoryService
from services.coffee_shop_service import CoffeeShopService
from services.menu_service import MenuService
from services.admin_service import AdminService
from services.profile_service import ProfileService
from services.home_service import HomeService

# Note: roles and order_events contain utility functions, not classes

__all__ = [
    "BaseService",
    "describe_error",
    "CoffeeShopCache",
    "CustomizationNameCache",
    "coffee_shop_cache",
    "customization_name_cache",
    "AuthService",
    "CartService",
    "ItemCustomizer",
    "CheckoutService",
    "OrderHistoryService",
    "CoffeeShopService",
    "MenuService",
    "AdminService",
    "ProfileService",
    "HomeService",
]

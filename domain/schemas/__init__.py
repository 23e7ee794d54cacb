"""
Pydantic schemas for API payloads.
"""

from domain.schemas.base import APIModel
from domain.schemas.auth_schemas import (
    Credentials,
    TokenPair,
    RegisterResult,
    MessageResponse,
    UploadResponse,
    ImageUpload,
    ErrorBody,
)
from domain.schemas.user_schemas import (
    Role,
    User,
    UserRoles,
    UserWithRoles,
    ProfileUpdate,
    RoleUpdate,
)
from domain.schemas.coffee_shop_schemas import (
    WorkingHoursPeriod,
    CoffeeShop,
    CoffeeShopInfo,
    CoffeeShopCreate,
    OwnerAssignment,
)
from domain.schemas.menu_schemas import (
    Size,
    Ingredient,
    CustomizationChoice,
    CustomizationOption,
    MenuItem,
    MenuGroup,
    MenuGroupCreate,
    MenuGroupUpdate,
    MenuItemCreate,
)
from domain.schemas.order_schemas import (
    OrderStatusHistory,
    OrderItem,
    Order,
    SelectedChoice,
    OrderItemCustomization,
    OrderItemRequest,
    OrderCreate,
    OrderStatusChange,
    CreateOrderWithPaymentResult,
    OrderPaymentStatus,
)
from domain.schemas.order_history_schemas import (
    CustomizationDetails,
    OrderHistoryItem,
    OrderStatusHistoryItem,
    OrderPaymentInfo,
    OrderHistory,
)

__all__ = [
    "APIModel",
    "Credentials",
    "TokenPair",
    "RegisterResult",
    "MessageResponse",
    "UploadResponse",
    "ImageUpload",
    "ErrorBody",
    "Role",
    "User",
    "UserRoles",
    "UserWithRoles",
    "ProfileUpdate",
    "RoleUpdate",
    "WorkingHoursPeriod",
    "CoffeeShop",
    "CoffeeShopInfo",
    "CoffeeShopCreate",
    "OwnerAssignment",
    "Size",
    "Ingredient",
    "CustomizationChoice",
    "CustomizationOption",
    "MenuItem",
    "MenuGroup",
    "MenuGroupCreate",
    "MenuGroupUpdate",
    "MenuItemCreate",
    "OrderStatusHistory",
    "OrderItem",
    "Order",
    "SelectedChoice",
    "OrderItemCustomization",
    "OrderItemRequest",
    "OrderCreate",
    "OrderStatusChange",
    "CreateOrderWithPaymentResult",
    "OrderPaymentStatus",
    "CustomizationDetails",
    "OrderHistoryItem",
    "OrderStatusHistoryItem",
    "OrderPaymentInfo",
    "OrderHistory",
]

"""
Sandbox-side records.

Orders are kept as records that render into a single JSON shape which the
client decodes both as ``Order`` and as ``OrderHistory``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any

from pydantic import Field

from domain.enums import OrderStatus, PaymentStatus
from domain.schemas.coffee_shop_schemas import WorkingHoursPeriod
from domain.schemas.menu_schemas import CustomizationOption, Ingredient, Size
from domain.schemas.base import (
    APIModel,
    ApiDateTime,
    ApiDecimal,
    OptionalApiDateTime,
    utcnow,
)


class StatusRecord(APIModel):
    id: str
    order_id: str
    status: OrderStatus
    comment: Optional[str] = None
    changed_by_user_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)


class PaymentRecord(APIModel):
    id: str
    status: PaymentStatus = PaymentStatus.PENDING
    amount: ApiDecimal
    method: str = "card"
    transaction_id: Optional[str] = None
    payment_url: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    completed_at: OptionalApiDateTime = None
    expires_at: OptionalApiDateTime = None


class OrderItemRecord(APIModel):
    id: str
    order_id: str
    menu_item_id: str
    name: str
    quantity: int
    price: ApiDecimal
    base_price: ApiDecimal
    final_price: ApiDecimal
    size_name: Optional[str] = None
    size_additional_price: Optional[ApiDecimal] = None
    customization: Optional[Dict[str, Any]] = None
    customization_summary: Optional[str] = None
    customization_details: Optional[Dict[str, Any]] = None


class OrderRecord(APIModel):
    id: str
    order_number: str
    user_id: str
    coffee_shop_id: str
    status: OrderStatus = OrderStatus.CREATED
    total_amount: ApiDecimal = Decimal("0")
    items: List[OrderItemRecord] = Field(default_factory=list)
    status_history: List[StatusRecord] = Field(default_factory=list)
    comment: Optional[str] = None
    is_paid: bool = False
    payment: Optional[PaymentRecord] = None
    scheduled_for: OptionalApiDateTime = None
    cancelled_by: Optional[str] = None
    cancellation_actor: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)
    completed_at: OptionalApiDateTime = None

    def touch(self, moment: Optional[datetime] = None) -> None:
        self.updated_at = moment or utcnow()


class AvailabilityResult(APIModel):
    """Body of the availability toggle; the client ignores it"""

    success: bool = True
    is_available: bool


# ============================================================================
# Partial update bodies
# ============================================================================


class CoffeeShopUpdate(APIModel):
    """PATCH /coffee-shops/{id}; only keys present in the body are applied"""

    name: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    allow_scheduled_orders: Optional[bool] = None
    min_preorder_time_minutes: Optional[int] = None
    max_preorder_time_minutes: Optional[int] = None
    working_hours: Optional[Dict[str, WorkingHoursPeriod]] = None
    metadata: Optional[Dict[str, Any]] = None


class MenuItemUpdate(APIModel):
    name: Optional[str] = None
    price: Optional[ApiDecimal] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    ingredients: Optional[List[Ingredient]] = None
    customization_options: Optional[List[CustomizationOption]] = None
    has_multiple_sizes: Optional[bool] = None
    sizes: Optional[List[Size]] = None

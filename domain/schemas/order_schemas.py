from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any

from pydantic import Field

from domain.enums import OrderStatus
from domain.schemas.base import (
    APIModel,
    ApiDateTime,
    ApiDecimal,
    LenientDecimal,
    OptionalApiDateTime,
    utcnow,
)
from domain.schemas.coffee_shop_schemas import CoffeeShopInfo


class OrderStatusHistory(APIModel):
    id: str
    order_id: Optional[str] = None
    status: OrderStatus
    comment: Optional[str] = None
    changed_by_user_id: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)


class OrderItem(APIModel):
    """Line of a placed order; price may come as a number or a numeric string"""

    id: str
    order_id: Optional[str] = None
    menu_item_id: Optional[str] = None
    name: str
    quantity: int = 1
    price: ApiDecimal
    base_price: LenientDecimal = None
    final_price: LenientDecimal = None
    size_name: Optional[str] = None
    customization_summary: Optional[str] = None
    customization: Optional[Dict[str, Any]] = None

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity


class Order(APIModel):
    id: str
    order_number: Optional[str] = None
    user_id: Optional[str] = None
    coffee_shop_id: str
    coffee_shop: Optional[CoffeeShopInfo] = None
    status: OrderStatus
    total_amount: ApiDecimal
    items: List[OrderItem] = Field(default_factory=list)
    status_history: Optional[List[OrderStatusHistory]] = None
    comment: Optional[str] = None
    is_paid: bool = False
    scheduled_for: OptionalApiDateTime = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)


# ============================================================================
# Request bodies
# ============================================================================


class SelectedChoice(APIModel):
    choice_id: str
    quantity: int = 1


class OrderItemCustomization(APIModel):
    """Selections sent with an order line"""

    selected_size: Optional[str] = None
    selected_ingredients: Dict[str, float] = Field(default_factory=dict)
    selected_options: Dict[str, List[SelectedChoice]] = Field(default_factory=dict)


class OrderItemRequest(APIModel):
    menu_item_id: str
    quantity: int = Field(default=1, ge=1)
    customization: Optional[OrderItemCustomization] = None


class OrderCreate(APIModel):
    coffee_shop_id: str
    items: List[OrderItemRequest]
    comment: Optional[str] = None
    scheduled_for: Optional[datetime] = None


class OrderStatusChange(APIModel):
    status: OrderStatus
    comment: Optional[str] = None


# ============================================================================
# Payment
# ============================================================================


class CreateOrderWithPaymentResult(APIModel):
    order_id: str
    order_number: str
    status: str
    total_amount: ApiDecimal
    payment_url: Optional[str] = None
    payment_id: Optional[str] = None
    expires_at: OptionalApiDateTime = None


class OrderPaymentStatus(APIModel):
    order_id: str
    payment_id: Optional[str] = None
    status: str
    paid_amount: LenientDecimal = None
    is_paid: bool = False
    payment_url: Optional[str] = None

"""
Checkout: cart conflicts, order creation with payment and payment tracking.
"""

from datetime import datetime
from typing import List, Optional

from app.exceptions import NotFoundError, ServiceValidationError
from domain.cart import CartCustomization, CartItem
from domain.schemas.order_schemas import (
    CreateOrderWithPaymentResult,
    OrderItemCustomization,
    OrderItemRequest,
    OrderPaymentStatus,
    SelectedChoice,
)
from repositories import OrderRepository, PaymentRepository
from services.base_service import BaseService
from services.cart_service import CartService


def to_order_customization(customization: Optional[CartCustomization]) -> Optional[OrderItemCustomization]:
    """Convert the cart snapshot into the selections the order API expects"""
    if customization is None or customization.is_empty:
        return None
    return OrderItemCustomization(
        selected_size=customization.size.id if customization.size else None,
        selected_ingredients={i.id: i.amount for i in customization.ingredients},
        selected_options={
            option.id: [SelectedChoice(choice_id=c.id, quantity=c.quantity) for c in option.choices]
            for option in customization.options
        },
    )


def to_order_items(items: List[CartItem]) -> List[OrderItemRequest]:
    return [
        OrderItemRequest(
            menu_item_id=item.menu_item_id,
            quantity=item.quantity,
            customization=to_order_customization(item.customization),
        )
        for item in items
    ]


class CheckoutService(BaseService):
    """State of the cart screen from adding items through payment"""

    def __init__(
        self,
        cart_service: CartService,
        payment_repository: PaymentRepository,
        order_repository: Optional[OrderRepository] = None,
    ):
        super().__init__("nidus.checkout")
        self.cart_service = cart_service
        self.payment_repository = payment_repository
        self.order_repository = order_repository or OrderRepository(payment_repository.api)
        self.pending_item: Optional[CartItem] = None
        self.current_order: Optional[CreateOrderWithPaymentResult] = None
        self.payment_url: Optional[str] = None
        self.is_paid = False

    # ------------------------------------------------------------------
    # Cart conflicts
    # ------------------------------------------------------------------

    @property
    def has_conflict(self) -> bool:
        return self.pending_item is not None

    def add_to_cart(self, item: CartItem) -> bool:
        """Add an item; on a shop conflict the item is parked until resolved"""
        if self.cart_service.add_item(item):
            self.pending_item = None
            return True
        self.pending_item = item
        return False

    def resolve_conflict_by_clearing(self) -> bool:
        """Empty the cart and add the parked item"""
        if self.pending_item is None:
            return False
        self.cart_service.clear()
        added = self.cart_service.add_item(self.pending_item)
        self.pending_item = None
        return added

    def cancel_pending_item(self) -> None:
        self.pending_item = None

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def checkout(self, comment: Optional[str] = None, scheduled_for: Optional[datetime] = None) -> str:
        """
        Create the order and return the payment page URL.

        Raises:
            ServiceValidationError: cart is empty or the server returned no payment URL
            APIError: the request failed
        """
        cart = self.cart_service.cart
        if cart.is_empty or not cart.coffee_shop_id:
            raise ServiceValidationError("Cart is empty", code="CART_EMPTY")

        result = self.payment_repository.create_order_with_payment(
            coffee_shop_id=cart.coffee_shop_id,
            items=to_order_items(cart.items),
            comment=comment or None,
            scheduled_for=scheduled_for,
        )
        if not result.payment_url:
            raise ServiceValidationError(
                "Payment link was not received", details={"order_id": result.order_id}
            )
        self.current_order = result
        self.payment_url = result.payment_url
        self.is_paid = False
        self.log_info("Order created", order_id=result.order_id, total=result.total_amount)
        return result.payment_url

    def _require_order(self) -> str:
        if self.current_order is None:
            raise NotFoundError("No order awaiting payment", code="NO_ACTIVE_ORDER")
        return self.current_order.order_id

    def check_payment_status(self) -> OrderPaymentStatus:
        """Poll the payment; a paid order empties the cart"""
        status = self.payment_repository.get_payment_status(self._require_order())
        if status.is_paid:
            self.is_paid = True
            self.cart_service.clear()
            self.log_info("Order paid", order_id=status.order_id)
        return status

    def retry_payment(self) -> str:
        result = self.payment_repository.retry_payment(self._require_order())
        if not result.payment_url:
            raise ServiceValidationError("Payment link was not received")
        self.current_order = result
        self.payment_url = result.payment_url
        return result.payment_url

    def cancel_order(self) -> None:
        self.order_repository.cancel(self._require_order())
        self.current_order = None
        self.payment_url = None

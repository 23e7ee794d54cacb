"""
Payment Repository - orders paid through the hosted payment page
"""

from datetime import datetime
from typing import List, Optional

from repositories.base import ApiRepository
from domain.schemas.order_schemas import (
    CreateOrderWithPaymentResult,
    OrderCreate,
    OrderItemRequest,
    OrderPaymentStatus,
)


class PaymentRepository(ApiRepository):
    def create_order_with_payment(
        self,
        coffee_shop_id: str,
        items: List[OrderItemRequest],
        comment: Optional[str] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> CreateOrderWithPaymentResult:
        request = OrderCreate(
            coffee_shop_id=coffee_shop_id,
            items=items,
            comment=comment,
            scheduled_for=scheduled_for,
        )
        return self.api.post("/orders/create-with-payment", request, CreateOrderWithPaymentResult)

    def get_payment_status(self, order_id: str) -> OrderPaymentStatus:
        return self.api.fetch(f"/orders/{order_id}/payment-status", OrderPaymentStatus)

    def retry_payment(self, order_id: str) -> CreateOrderWithPaymentResult:
        return self.api.post(f"/orders/{order_id}/retry-payment", None, CreateOrderWithPaymentResult)

"""
Order History Repository - paged order history of the signed-in user
"""

from typing import List, Optional, Sequence

from app.config import settings
from repositories.base import ApiRepository
from domain.enums import OrderStatus
from domain.schemas.order_history_schemas import OrderHistory
from domain.schemas.order_schemas import OrderPaymentStatus


class OrderHistoryRepository(ApiRepository):
    def get_history(
        self,
        statuses: Optional[Sequence[OrderStatus]] = None,
        limit: Optional[int] = None,
        page: int = 1,
    ) -> List[OrderHistory]:
        params = {
            "status[]": [s.value for s in statuses] if statuses else None,
            "limit": limit or settings.order_history_page_size,
            "page": page,
        }
        return self.api.fetch("/orders/my/history", List[OrderHistory], params=params)

    def get_active(self, limit: Optional[int] = None, page: int = 1) -> List[OrderHistory]:
        params = {"limit": limit or settings.order_history_page_size, "page": page}
        return self.api.fetch("/orders/my", List[OrderHistory], params=params)

    def get_order(self, order_id: str) -> OrderHistory:
        return self.api.fetch(f"/orders/{order_id}", OrderHistory)

    def get_payment_status(self, order_id: str) -> OrderPaymentStatus:
        return self.api.fetch(f"/orders/{order_id}/payment-status", OrderPaymentStatus)

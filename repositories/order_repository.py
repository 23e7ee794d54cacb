"""
Order Repository - placing, tracking and managing orders
"""

from datetime import datetime
from typing import List, Optional, Sequence

from repositories.base import ApiRepository
from domain.enums import OrderStatus
from domain.schemas.order_schemas import Order, OrderCreate, OrderStatusChange


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


class OrderRepository(ApiRepository):
    def get_my_active(self) -> List[Order]:
        return self.api.fetch("/orders/my", List[Order])

    def get_my_history(self) -> List[Order]:
        return self.api.fetch("/orders/my/history", List[Order])

    def get_by_id(self, order_id: str) -> Order:
        return self.api.fetch(f"/orders/{order_id}", Order)

    def create(self, request: OrderCreate) -> Order:
        return self.api.post("/orders", request, Order)

    def cancel(self, order_id: str) -> Order:
        return self.api.patch(f"/orders/{order_id}/cancel", None, Order)

    def get_coffee_shop_orders(
        self,
        coffee_shop_id: str,
        statuses: Optional[Sequence[OrderStatus]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Order]:
        """Orders of one shop, optionally filtered by status and creation window"""
        params = {
            "status": ",".join(s.value for s in statuses) if statuses else None,
            "startDate": _iso(start_date) if start_date else None,
            "endDate": _iso(end_date) if end_date else None,
        }
        return self.api.fetch(f"/orders/coffee-shop/{coffee_shop_id}", List[Order], params=params)

    def update_status(self, order_id: str, status: OrderStatus, comment: Optional[str] = None) -> Order:
        return self.api.patch(
            f"/orders/{order_id}/status",
            OrderStatusChange(status=status, comment=comment),
            Order,
        )

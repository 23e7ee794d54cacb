"""
Domain enums for the Nidus client.
Contains all enumeration types shared by schemas, services and the sandbox.
"""

import enum
from typing import Optional


class RoleName(str, enum.Enum):
    """Role names assigned by the backend"""

    SUPERADMIN = "superadmin"
    COFFEE_SHOP_OWNER = "coffee_shop_owner"


class OrderStatus(str, enum.Enum):
    """Order lifecycle states"""

    CREATED = "created"
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self not in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class PaymentStatus(str, enum.Enum):
    """Payment states reported alongside an order"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CancellationActor(str, enum.Enum):
    """Who cancelled an order"""

    CUSTOMER = "customer"
    COFFEE_SHOP = "coffee_shop"
    ADMIN = "admin"
    SYSTEM = "system"


class OrderHistoryFilter(str, enum.Enum):
    """Tabs of the order history screen"""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def statuses(self) -> Optional[list[OrderStatus]]:
        """Statuses matched by this filter, or None for no restriction"""
        if self is OrderHistoryFilter.ALL:
            return None
        if self is OrderHistoryFilter.PENDING:
            return [
                OrderStatus.CREATED,
                OrderStatus.PENDING,
                OrderStatus.ACCEPTED,
                OrderStatus.PREPARING,
                OrderStatus.READY,
            ]
        if self is OrderHistoryFilter.COMPLETED:
            return [OrderStatus.COMPLETED]
        return [OrderStatus.CANCELLED]

    @property
    def title(self) -> str:
        return {
            OrderHistoryFilter.ALL: "All",
            OrderHistoryFilter.PENDING: "Active",
            OrderHistoryFilter.COMPLETED: "Completed",
            OrderHistoryFilter.CANCELLED: "Cancelled",
        }[self]

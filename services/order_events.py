"""
Realtime order events.

The backend pushes ``orderStatusUpdated`` and ``orderCancelled`` events; this
module decodes their payloads and derives the cancellation message to show.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from domain.enums import OrderStatus
from domain.schemas.base import APIModel, LenientDecimal, OptionalApiDateTime
from domain.schemas.order_history_schemas import OrderHistory

logger = logging.getLogger("nidus.events")

ORDER_STATUS_UPDATED = "orderStatusUpdated"
ORDER_CANCELLED = "orderCancelled"


class OrderStatusUpdate(APIModel):
    order_id: str
    new_status: OrderStatus
    previous_status: Optional[OrderStatus] = None
    order_number: Optional[str] = None
    coffee_shop_id: Optional[str] = None
    comment: Optional[str] = None
    staff_comment: Optional[str] = None
    cancellation_reason: Optional[str] = None
    updated_at: OptionalApiDateTime = None


class OrderCancellation(APIModel):
    order_id: str
    order_number: Optional[str] = None
    coffee_shop_id: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancellation_actor: Optional[str] = None
    cancellation_reason: Optional[str] = None
    comment: Optional[str] = None
    refund_status: Optional[str] = None
    refund_amount: LenientDecimal = None
    updated_at: OptionalApiDateTime = None


OrderEvent = Union[OrderStatusUpdate, OrderCancellation]


def parse_event(name: str, payload: Mapping[str, Any]) -> Optional[OrderEvent]:
    """Decode an event payload; unknown or malformed events yield None"""
    model = {
        ORDER_STATUS_UPDATED: OrderStatusUpdate,
        ORDER_CANCELLED: OrderCancellation,
    }.get(name)
    if model is None:
        logger.debug("Ignoring event %s", name)
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Malformed %s payload: %s", name, exc)
        return None


def cancellation_message(order: OrderHistory, event: Optional[OrderEvent] = None) -> Optional[str]:
    """Cancellation note for a cancelled order, preferring what the event carried"""
    if order.status is not OrderStatus.CANCELLED:
        return None
    if isinstance(event, OrderCancellation):
        for text in (event.cancellation_reason, event.comment):
            if text:
                return text
    elif isinstance(event, OrderStatusUpdate):
        for text in (event.cancellation_reason, event.staff_comment, event.comment):
            if text:
                return text
    return order.cancellation_comment


def apply_event(order: OrderHistory, event: OrderEvent) -> OrderHistory:
    """Return the order as it looks after the event"""
    if isinstance(event, OrderCancellation):
        return order.with_status(
            OrderStatus.CANCELLED,
            cancellation_reason=event.cancellation_reason or order.cancellation_reason,
            cancellation_actor=event.cancellation_actor or order.cancellation_actor,
            cancelled_by=event.cancelled_by or order.cancelled_by,
            comment=event.comment or order.comment,
        )
    changes = {}
    if event.new_status is OrderStatus.CANCELLED and event.cancellation_reason:
        changes["cancellation_reason"] = event.cancellation_reason
    if event.new_status is OrderStatus.COMPLETED and event.updated_at:
        changes["completed_at"] = event.updated_at
    return order.with_status(event.new_status, **changes)

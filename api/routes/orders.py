"""Order, order history and payment routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import get_current_user, get_store, require_manager
from api.responses import dump, paginate
from api.store import SandboxStore
from app.exceptions import ServiceValidationError
from domain.enums import OrderStatus, PaymentStatus
from domain.schemas.base import parse_datetime
from domain.schemas.order_schemas import (
    CreateOrderWithPaymentResult,
    OrderCreate,
    OrderPaymentStatus,
    OrderStatusChange,
)
from domain.schemas.user_schemas import User

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger("nidus.sandbox.orders")

ACTIVE_STATUSES = [s for s in OrderStatus if s.is_active]
FINISHED_STATUSES = [s for s in OrderStatus if not s.is_active]
NOT_STARTED = "not_started"


def _statuses(values: Optional[List[str]]) -> Optional[List[OrderStatus]]:
    if not values:
        return None
    try:
        return [OrderStatus(v.strip()) for v in values if v.strip()]
    except ValueError as exc:
        raise ServiceValidationError(f"Invalid order status: {exc}")


def _date(value: Optional[str], name: str):
    if value is None:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise ServiceValidationError(f"{name} must be an ISO 8601 date")
    return parsed


def _payment_result(order) -> dict:
    payment = order.payment
    return CreateOrderWithPaymentResult(
        order_id=order.id,
        order_number=order.order_number,
        status=order.status.value,
        total_amount=order.total_amount,
        payment_url=payment.payment_url if payment else None,
        payment_id=payment.id if payment else None,
        expires_at=payment.expires_at if payment else None,
    ).to_payload()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(body: OrderCreate, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    return store.render_order(store.create_order(user, body))


@router.post("/create-with-payment", status_code=status.HTTP_201_CREATED)
def create_with_payment(body: OrderCreate, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    """Create an order and open a payment for it"""
    order = store.create_order(user, body)
    store.start_payment(order)
    logger.info("Payment %s opened for order %s", order.payment.id, order.order_number)
    return _payment_result(order)


@router.get("/my")
def my_active_orders(
    limit: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(get_current_user),
):
    orders = store.orders_of_user(user.id, ACTIVE_STATUSES)
    return [store.render_order(o) for o in paginate(orders, limit, page)]


@router.get("/my/history")
def my_history(
    status_filter: Optional[List[str]] = Query(None, alias="status[]"),
    limit: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(get_current_user),
):
    """Finished orders unless statuses are given"""
    statuses = _statuses(status_filter) or FINISHED_STATUSES
    orders = store.orders_of_user(user.id, statuses)
    return [store.render_order(o) for o in paginate(orders, limit, page)]


@router.get("/coffee-shop/{coffee_shop_id}")
def coffee_shop_orders(
    coffee_shop_id: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    store.check_can_manage(user, store.get_shop(coffee_shop_id))
    orders = store.orders_of_shop(
        coffee_shop_id,
        _statuses(status_filter.split(",") if status_filter else None),
        _date(start_date, "startDate"),
        _date(end_date, "endDate"),
    )
    return [store.render_order(o) for o in orders]


@router.get("/{order_id}")
def get_order(order_id: str, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    return store.render_order(store.get_order_for(user, order_id))


@router.patch("/{order_id}/cancel")
def cancel_order(order_id: str, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    return store.render_order(store.cancel_order(user, order_id))


@router.patch("/{order_id}/status")
def change_status(
    order_id: str,
    body: OrderStatusChange,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    order = store.change_status(user, order_id, body.status, body.comment)
    logger.info("Order %s is now %s", order.order_number, order.status.value)
    return store.render_order(order)


@router.get("/{order_id}/payment-status")
def payment_status(order_id: str, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    order = store.get_order_for(user, order_id)
    payment = order.payment
    return OrderPaymentStatus(
        order_id=order.id,
        payment_id=payment.id if payment else None,
        status=payment.status.value if payment else NOT_STARTED,
        paid_amount=payment.amount if payment and payment.status == PaymentStatus.COMPLETED else None,
        is_paid=order.is_paid,
        payment_url=payment.payment_url if payment else None,
    ).to_payload(exclude_none=False)


@router.post("/{order_id}/retry-payment")
def retry_payment(order_id: str, store: SandboxStore = Depends(get_store), user: User = Depends(get_current_user)):
    order = store.get_order_for(user, order_id)
    store.start_payment(order)
    return _payment_result(order)


@router.post("/{order_id}/simulate-payment")
def simulate_payment(
    order_id: str,
    success: bool = Query(True),
    store: SandboxStore = Depends(get_store),
):
    """Stands in for the payment provider's callback"""
    order = store.complete_payment(order_id) if success else store.fail_payment(order_id)
    return store.render_order(order)

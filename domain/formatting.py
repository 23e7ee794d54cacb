"""
Display formatting for money, dates and statuses.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from app.config import settings
from domain.enums import CancellationActor, OrderStatus, PaymentStatus
from domain.schemas.base import parse_datetime

Number = Union[Decimal, int, float]

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

ORDER_STATUS_LABELS = {
    OrderStatus.CREATED: "Created",
    OrderStatus.PENDING: "Pending",
    OrderStatus.ACCEPTED: "Accepted",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY: "Ready for pickup",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELLED: "Cancelled",
}

ORDER_STATUS_COLORS = {
    OrderStatus.CREATED: "gray",
    OrderStatus.PENDING: "orange",
    OrderStatus.ACCEPTED: "blue",
    OrderStatus.PREPARING: "purple",
    OrderStatus.READY: "green",
    OrderStatus.COMPLETED: "green",
    OrderStatus.CANCELLED: "red",
}

PAYMENT_STATUS_LABELS = {
    PaymentStatus.PENDING: "Awaiting payment",
    PaymentStatus.PROCESSING: "Processing",
    PaymentStatus.COMPLETED: "Paid",
    PaymentStatus.FAILED: "Payment failed",
    PaymentStatus.CANCELLED: "Cancelled",
}

PAYMENT_STATUS_COLORS = {
    PaymentStatus.PENDING: "orange",
    PaymentStatus.PROCESSING: "primary",
    PaymentStatus.COMPLETED: "green",
    PaymentStatus.FAILED: "red",
    PaymentStatus.CANCELLED: "grey",
}

CANCELLATION_TEXT = {
    CancellationActor.CUSTOMER.value: "Order cancelled by the customer",
    CancellationActor.COFFEE_SHOP.value: "Order cancelled by the coffee shop",
    CancellationActor.ADMIN.value: "Order cancelled by an administrator",
}
DEFAULT_CANCELLATION_TEXT = "Order cancelled"


def _to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def format_currency(amount: Number, min_fraction: int = 0, max_fraction: int = 2) -> str:
    """Format a price with between min_fraction and max_fraction decimals, e.g. "45 ₴" or "45.5 ₴"."""
    value = _to_decimal(amount).quantize(Decimal(1).scaleb(-max_fraction), rounding=ROUND_HALF_UP)
    text = f"{value:.{max_fraction}f}"
    if max_fraction > min_fraction and "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0")
        if len(frac) < min_fraction:
            frac = frac.ljust(min_fraction, "0")
        text = f"{whole}.{frac}" if frac else whole
    return f"{text} {settings.currency_symbol}"


def format_amount(amount: Number) -> str:
    """Fixed two-decimal amount, e.g. "45.00 ₴"."""
    return format_currency(amount, min_fraction=2, max_fraction=2)


def _as_moment(value: Union[datetime, str, None]) -> Union[datetime, str]:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value
    return parse_datetime(value) or value


def format_order_date(value: Union[datetime, str, None]) -> str:
    """e.g. "3 May 2025, 14:05"; an unparseable string is returned as is"""
    moment = _as_moment(value)
    if isinstance(moment, str):
        return moment
    return f"{moment.day} {MONTHS[moment.month - 1]} {moment.year}, {moment:%H:%M}"


def format_short_date(value: Union[datetime, str, None]) -> str:
    """e.g. "3 May 14:05" """
    moment = _as_moment(value)
    if isinstance(moment, str):
        return moment
    return f"{moment.day} {MONTHS[moment.month - 1][:3]} {moment:%H:%M}"


def order_status_label(status: OrderStatus) -> str:
    return ORDER_STATUS_LABELS[status]


def order_status_color(status: OrderStatus) -> str:
    return ORDER_STATUS_COLORS[status]


def payment_status_label(status: PaymentStatus) -> str:
    return PAYMENT_STATUS_LABELS[status]


def payment_status_color(status: PaymentStatus) -> str:
    return PAYMENT_STATUS_COLORS[status]


def cancellation_text(actor: Optional[str]) -> Optional[str]:
    if actor is None:
        return None
    return CANCELLATION_TEXT.get(actor, DEFAULT_CANCELLATION_TEXT)

"""
Order history payloads returned by /orders/my/history.

These are richer than the plain Order schema: they embed the shop, payment
information, cancellation details and per-item customization breakdowns.
"""

from decimal import Decimal
from typing import Optional, List, Dict, Any, Callable

from pydantic import Field

from domain import formatting
from domain.enums import OrderStatus, PaymentStatus
from domain.schemas.base import (
    APIModel,
    ApiDateTime,
    HistoryAmount,
    LenientDecimal,
    OptionalApiDateTime,
    utcnow,
)
from domain.schemas.coffee_shop_schemas import CoffeeShopInfo

# Default texts the backend attaches to cancellations; they carry no user input.
STANDARD_CANCELLATION_MESSAGES = frozenset(
    {
        "Замовлення скасовано користувачем",
        "Замовлення скасовано кав'ярнею",
        "Замовлення скасовано клієнтом",
        "Замовлення скасовано закладом",
        "Замовлення скасовано адміністратором",
        "Order cancelled by the customer",
        "Order cancelled by the coffee shop",
        "Order cancelled by an administrator",
    }
)

UNKNOWN_COFFEE_SHOP = "Unknown coffee shop"


def _custom_text(text: Optional[str]) -> Optional[str]:
    if text and text not in STANDARD_CANCELLATION_MESSAGES:
        return text
    return None


# ============================================================================
# Customization breakdown
# ============================================================================


class PricingDetail(APIModel):
    total_price: LenientDecimal = None


class SizeDetail(APIModel):
    id: Optional[str] = None
    name: str
    additional_price: HistoryAmount = Decimal("0")


class ChoiceDetail(APIModel):
    id: Optional[str] = None
    name: str
    quantity: Optional[int] = None
    pricing: Optional[PricingDetail] = None

    @property
    def total_price(self) -> Decimal:
        if self.pricing and self.pricing.total_price is not None:
            return self.pricing.total_price
        return Decimal("0")


class OptionDetail(APIModel):
    """Option entry; newer payloads group choices, older ones are flat"""

    option_group_name: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[int] = None
    price: LenientDecimal = None
    total_price: LenientDecimal = None
    choices: Optional[List[ChoiceDetail]] = None


class IngredientDetail(APIModel):
    id: Optional[str] = None
    name: str
    amount: float
    unit: Optional[str] = None
    pricing: Optional[PricingDetail] = None


class CustomizationDetails(APIModel):
    size: Optional[SizeDetail] = None
    options: Optional[List[OptionDetail]] = None
    ingredients: Optional[List[IngredientDetail]] = None

    def describe(self) -> Optional[str]:
        """Human-readable breakdown without the size, one section per line"""
        lines: List[str] = []

        ingredient_texts = []
        for ingredient in self.ingredients or []:
            amount = f"{ingredient.amount:g}"
            text = f"{ingredient.name} {amount}{ingredient.unit or ''}".rstrip()
            extra = ingredient.pricing.total_price if ingredient.pricing else None
            if extra:
                text += f" (+{formatting.format_amount(extra)})"
            ingredient_texts.append(text)
        if ingredient_texts:
            lines.append("Ingredients: " + ", ".join(ingredient_texts))

        groups: Dict[str, List[str]] = {}
        for option in self.options or []:
            if option.choices:
                group = option.option_group_name or "Extras"
                for choice in option.choices:
                    groups.setdefault(group, []).append(
                        _choice_text(choice.name, choice.quantity or 1, choice.total_price)
                    )
            elif option.name:
                total = option.total_price if option.total_price is not None else option.price
                groups.setdefault(option.option_group_name or "Extras", []).append(
                    _choice_text(option.name, option.quantity or 1, total or Decimal("0"))
                )
        if groups:
            lines.append(
                "Options: "
                + "; ".join(f"{name}: {', '.join(texts)}" for name, texts in groups.items())
            )
        return "\n".join(lines) or None


def _choice_text(name: str, quantity: int, total: Decimal) -> str:
    text = f"{name} x{quantity}" if quantity > 1 else name
    if total > 0:
        text += f" (+{formatting.format_amount(total)})"
    return text


# ============================================================================
# History entities
# ============================================================================


class OrderHistoryItem(APIModel):
    id: str
    name: str
    quantity: int = 1
    price: HistoryAmount = Decimal("0")
    base_price: LenientDecimal = None
    final_price: LenientDecimal = None
    size_name: Optional[str] = None
    size_additional_price: LenientDecimal = None
    customization: Optional[Dict[str, Any]] = None
    customization_summary: Optional[str] = None
    customization_details: Optional[CustomizationDetails] = None

    @property
    def unit_price(self) -> Decimal:
        return self.final_price if self.final_price is not None else self.price

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def formatted_price(self) -> str:
        return formatting.format_amount(self.unit_price)

    @property
    def formatted_total(self) -> str:
        return formatting.format_amount(self.total_price)

    @property
    def effective_size_additional_price(self) -> Optional[Decimal]:
        if self.size_additional_price is not None:
            return self.size_additional_price
        if self.customization_details and self.customization_details.size:
            return self.customization_details.size.additional_price
        return None

    @property
    def display_customization(self) -> Optional[str]:
        if self.customization_details:
            text = self.customization_details.describe()
            if text:
                return text
        if self.customization_summary:
            # Summary sections are joined with " | "; the size is shown separately.
            parts = [
                p.strip()
                for p in self.customization_summary.split(" | ")
                if p.strip() and not p.strip().startswith(("Size:", "Розмір:"))
            ]
            return "\n".join(parts) or None
        return None


class OrderStatusHistoryItem(APIModel):
    id: str
    status: OrderStatus
    comment: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    created_by: Optional[str] = None

    @property
    def formatted_date(self) -> str:
        return formatting.format_short_date(self.created_at)


class OrderPaymentInfo(APIModel):
    id: str
    status: PaymentStatus
    amount: HistoryAmount = Decimal("0")
    method: Optional[str] = None
    transaction_id: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    completed_at: OptionalApiDateTime = None
    payment_url: Optional[str] = None

    @property
    def formatted_amount(self) -> str:
        return formatting.format_amount(self.amount)

    @property
    def status_display_name(self) -> str:
        return formatting.payment_status_label(self.status)

    @property
    def status_color(self) -> str:
        return formatting.payment_status_color(self.status)


class OrderHistory(APIModel):
    """One order on the history screen"""

    id: str
    order_number: str
    status: OrderStatus
    total_amount: HistoryAmount
    coffee_shop_id: str
    coffee_shop_name: Optional[str] = None
    coffee_shop: Optional[CoffeeShopInfo] = None
    is_paid: bool = False
    created_at: ApiDateTime = Field(default_factory=utcnow)
    completed_at: OptionalApiDateTime = None
    items: List[OrderHistoryItem] = Field(default_factory=list)
    status_history: List[OrderStatusHistoryItem] = Field(default_factory=list)
    payment: Optional[OrderPaymentInfo] = None
    cancelled_by: Optional[str] = None
    cancellation_actor: Optional[str] = None
    cancellation_reason: Optional[str] = None
    comment: Optional[str] = None

    @property
    def formatted_created_date(self) -> str:
        return formatting.format_order_date(self.created_at)

    @property
    def formatted_total(self) -> str:
        return formatting.format_amount(self.total_amount)

    @property
    def status_display_name(self) -> str:
        return formatting.order_status_label(self.status)

    @property
    def status_color(self) -> str:
        return formatting.order_status_color(self.status)

    def display_coffee_shop_name(self, lookup: Optional[Callable[[str], Optional[str]]] = None) -> str:
        """Shop name from the embedded shop, the flat field, then the lookup"""
        if self.coffee_shop is not None:
            return self.coffee_shop.name
        if self.coffee_shop_name:
            return self.coffee_shop_name
        if lookup is not None:
            cached = lookup(self.coffee_shop_id)
            if cached:
                return cached
        return UNKNOWN_COFFEE_SHOP

    @property
    def cancellation_display_text(self) -> Optional[str]:
        if self.status is not OrderStatus.CANCELLED:
            return None
        return formatting.cancellation_text(self.cancellation_actor)

    @property
    def cancellation_comment(self) -> Optional[str]:
        """User-written cancellation note, ignoring the backend's default texts"""
        if self.status is not OrderStatus.CANCELLED:
            return None
        for text in (self.cancellation_reason, self.comment):
            custom = _custom_text(text)
            if custom:
                return custom
        cancelled = [h for h in self.status_history if h.status is OrderStatus.CANCELLED]
        if cancelled:
            return _custom_text(cancelled[-1].comment)
        return None

    def with_status(self, status: OrderStatus, **changes) -> "OrderHistory":
        """Copy with a new status, used when a realtime update arrives"""
        return self.model_copy(update={"status": status, **changes})

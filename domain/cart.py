"""
Client-side cart.

A cart only ever holds items from a single coffee shop. Adding an item that
matches an existing line (same menu item, size and customization) increases
that line's quantity instead of creating a new one.
"""

import uuid
from decimal import Decimal
from typing import Optional, List

from pydantic import Field

from domain import formatting
from domain.schemas.base import APIModel, ApiDecimal
from domain.schemas.menu_schemas import MenuItem


class SizeSelection(APIModel):
    id: str
    name: str
    abbreviation: str
    additional_price: ApiDecimal = Decimal("0")


class IngredientSelection(APIModel):
    id: str
    name: str
    amount: float


class ChoiceSelection(APIModel):
    id: str
    name: str
    quantity: int = 1
    price: ApiDecimal = Decimal("0")


class OptionSelection(APIModel):
    id: str
    name: str
    choices: List[ChoiceSelection] = Field(default_factory=list)


class CartCustomization(APIModel):
    """Snapshot of what was chosen on the item screen"""

    size: Optional[SizeSelection] = None
    ingredients: List[IngredientSelection] = Field(default_factory=list)
    options: List[OptionSelection] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.size is None and not self.ingredients and not self.options

    def summary(self) -> str:
        parts = []
        if self.size is not None:
            parts.append(self.size.name)
        for ingredient in self.ingredients:
            parts.append(f"{ingredient.name}: {ingredient.amount:g}")
        for option in self.options:
            names = [
                f"{c.name} x{c.quantity}" if c.quantity > 1 else c.name
                for c in option.choices
            ]
            if names:
                parts.append(f"{option.name}: {', '.join(names)}")
        return ", ".join(parts)


class CartItem(APIModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    menu_item_id: str
    coffee_shop_id: str
    quantity: int = Field(default=1, ge=1)
    name: str
    price: ApiDecimal
    customization_price: ApiDecimal = Decimal("0")
    image_url: Optional[str] = None
    selected_size: Optional[str] = None
    customization: Optional[CartCustomization] = None

    @classmethod
    def from_menu_item(
        cls,
        menu_item: MenuItem,
        coffee_shop_id: str,
        quantity: int = 1,
        selected_size: Optional[str] = None,
        customization: Optional[CartCustomization] = None,
        customization_price: Decimal = Decimal("0"),
    ) -> "CartItem":
        return cls(
            menu_item_id=menu_item.id,
            coffee_shop_id=coffee_shop_id,
            quantity=quantity,
            name=menu_item.name,
            price=menu_item.price,
            customization_price=customization_price,
            image_url=menu_item.image_url,
            selected_size=selected_size,
            customization=customization,
        )

    @property
    def unit_price(self) -> Decimal:
        return self.price + self.customization_price

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def formatted_total_price(self) -> str:
        return formatting.format_currency(self.total_price)

    def same_line_as(self, other: "CartItem") -> bool:
        return (
            self.menu_item_id == other.menu_item_id
            and self.selected_size == other.selected_size
            and self.customization == other.customization
        )


class Cart(APIModel):
    items: List[CartItem] = Field(default_factory=list)
    coffee_shop_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal("0"))

    @property
    def formatted_total_price(self) -> str:
        return formatting.format_currency(self.total_price)

    def can_add_item_from(self, coffee_shop_id: str) -> bool:
        return self.is_empty or self.coffee_shop_id == coffee_shop_id

    def add_item(self, item: CartItem) -> bool:
        """Add or merge an item; returns False when it belongs to another shop"""
        if not self.can_add_item_from(item.coffee_shop_id):
            return False
        if self.is_empty:
            self.coffee_shop_id = item.coffee_shop_id

        for existing in self.items:
            if existing.same_line_as(item):
                existing.quantity += item.quantity
                return True
        self.items.append(item)
        return True

    def update_quantity(self, item_id: str, quantity: int) -> None:
        for item in self.items:
            if item.id == item_id:
                item.quantity = max(1, quantity)
                return

    def remove_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]
        self._reset_if_empty()

    def remove_item_at(self, index: int) -> None:
        if 0 <= index < len(self.items):
            del self.items[index]
            self._reset_if_empty()

    def clear(self) -> None:
        self.items = []
        self.coffee_shop_id = None

    def _reset_if_empty(self) -> None:
        if not self.items:
            self.coffee_shop_id = None

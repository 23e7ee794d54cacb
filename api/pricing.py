"""
Server-side pricing of order lines in the sandbox.

Uses the same surcharge rules as the item screen so that a cart total and the
order total agree.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.exceptions import ServiceValidationError
from domain.schemas.menu_schemas import MenuItem, Size
from domain.schemas.order_schemas import OrderItemCustomization
from services.customization_service import choice_extra, ingredient_extra


class PricedLine:
    """Unit price of one order line plus the breakdown shown in order history"""

    def __init__(self, menu_item: MenuItem):
        self.menu_item = menu_item
        self.size: Optional[Size] = None
        self.ingredients: List[Dict[str, Any]] = []
        self.options: List[Dict[str, Any]] = []
        self.summary_parts: List[str] = []
        self.extras = Decimal("0")

    @property
    def unit_price(self) -> Decimal:
        size_price = self.size.additional_price if self.size else Decimal("0")
        return self.menu_item.price + size_price + self.extras

    def details(self) -> Optional[Dict[str, Any]]:
        if self.size is None and not self.ingredients and not self.options:
            return None
        details: Dict[str, Any] = {}
        if self.size is not None:
            details["size"] = {
                "id": self.size.id,
                "name": self.size.name,
                "additionalPrice": float(self.size.additional_price),
            }
        if self.options:
            details["options"] = self.options
        if self.ingredients:
            details["ingredients"] = self.ingredients
        return details

    def summary(self) -> Optional[str]:
        return " | ".join(self.summary_parts) or None


def price_line(menu_item: MenuItem, customization: Optional[OrderItemCustomization]) -> PricedLine:
    line = PricedLine(menu_item)
    if customization is None:
        line.size = menu_item.default_size
        if line.size is not None:
            line.summary_parts.append(f"Size: {line.size.name}")
        return line

    if customization.selected_size:
        line.size = next(
            (s for s in menu_item.sizes or [] if customization.selected_size in (s.id, s.abbreviation)),
            None,
        )
        if line.size is None:
            raise ServiceValidationError(f"Unknown size {customization.selected_size} for {menu_item.name}")
    else:
        line.size = menu_item.default_size
    if line.size is not None:
        line.summary_parts.append(f"Size: {line.size.name}")

    ingredient_texts = []
    for key, amount in customization.selected_ingredients.items():
        ingredient = next((i for i in menu_item.customizable_ingredients if i.key == key), None)
        if ingredient is None:
            raise ServiceValidationError(f"Ingredient {key} cannot be customized")
        extra = ingredient_extra(ingredient, amount)
        line.extras += extra
        line.ingredients.append(
            {
                "id": ingredient.id,
                "name": ingredient.name,
                "amount": amount,
                "unit": ingredient.unit,
                "pricing": {"totalPrice": float(extra)},
            }
        )
        ingredient_texts.append(f"{ingredient.name} {amount:g}{ingredient.unit}")
    if ingredient_texts:
        line.summary_parts.append("Ingredients: " + ", ".join(ingredient_texts))

    for option_id, selected in customization.selected_options.items():
        option = next((o for o in menu_item.customization_options or [] if o.id == option_id), None)
        if option is None:
            raise ServiceValidationError(f"Unknown option {option_id}")
        choices = []
        for selection in selected:
            choice = option.choice(selection.choice_id)
            if choice is None:
                raise ServiceValidationError(f"Unknown choice {selection.choice_id}")
            extra = choice_extra(choice, selection.quantity)
            line.extras += extra
            choices.append(
                {
                    "id": choice.id,
                    "name": choice.name,
                    "quantity": selection.quantity,
                    "pricing": {"totalPrice": float(extra)},
                }
            )
        if choices:
            line.options.append({"optionGroupName": option.name, "choices": choices})
            names = ", ".join(c["name"] for c in choices)
            line.summary_parts.append(f"{option.name}: {names}")
    return line

"""
Editable form state for creating or editing a menu item.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from domain.schemas.menu_schemas import (
    CustomizationChoice,
    CustomizationOption,
    Ingredient,
    MenuItem,
    MenuItemCreate,
    Size,
)


@dataclass
class MenuItemForm:
    name: str = ""
    price: str = ""
    description: str = ""
    is_available: bool = True
    is_customizable: bool = False
    has_multiple_sizes: bool = False
    ingredients: List[Ingredient] = field(default_factory=list)
    customization_options: List[CustomizationOption] = field(default_factory=list)
    sizes: List[Size] = field(default_factory=list)

    @classmethod
    def from_menu_item(cls, item: Optional[MenuItem] = None) -> "MenuItemForm":
        if item is None:
            return cls()
        return cls(
            name=item.name,
            price=str(item.price),
            description=item.description or "",
            is_available=item.is_available,
            is_customizable=bool(item.ingredients) or bool(item.customization_options),
            has_multiple_sizes=bool(item.has_multiple_sizes),
            ingredients=[i.model_copy() for i in item.ingredients or []],
            customization_options=[o.model_copy(deep=True) for o in item.customization_options or []],
            sizes=[s.model_copy() for s in item.sizes or []],
        )

    def parse_price(self) -> Optional[Decimal]:
        """Price typed by the user; a comma works as decimal separator"""
        try:
            value = Decimal(self.price.strip().replace(",", "."))
        except InvalidOperation:
            return None
        if not value.is_finite() or value < 0:
            return None
        return value

    @property
    def is_valid(self) -> bool:
        return bool(self.name.strip()) and self.parse_price() is not None

    def to_create_request(self, group_id: Optional[str] = None) -> Optional[MenuItemCreate]:
        price = self.parse_price()
        if price is None:
            return None
        return MenuItemCreate(
            name=self.name.strip(),
            price=price,
            description=self.description.strip() or None,
            is_available=self.is_available,
            ingredients=self.ingredients if self.is_customizable else None,
            customization_options=self.customization_options if self.is_customizable else None,
            has_multiple_sizes=self.has_multiple_sizes,
            sizes=self.sizes if self.has_multiple_sizes and self.sizes else None,
            menu_group_id=group_id,
        )

    def to_update_payload(self) -> Optional[dict]:
        """Partial PATCH body; customization lists are cleared when turned off"""
        request = self.to_create_request()
        if request is None:
            return None
        payload = request.to_payload(exclude_none=False)
        payload.pop("menuGroupId", None)
        if not self.is_customizable:
            payload["ingredients"] = []
            payload["customizationOptions"] = []
        if payload.get("sizes") is None:
            payload["sizes"] = []
        return payload

    # ------------------------------------------------------------------
    # Ingredients
    # ------------------------------------------------------------------

    def add_ingredient(self, name: str, amount: float, unit: str, **extra) -> Ingredient:
        ingredient = Ingredient(id=str(uuid.uuid4()), name=name, amount=amount, unit=unit, **extra)
        self.ingredients.append(ingredient)
        return ingredient

    def update_ingredient(self, index: int, ingredient: Ingredient) -> None:
        if 0 <= index < len(self.ingredients):
            self.ingredients[index] = ingredient

    def remove_ingredient(self, index: int) -> None:
        if 0 <= index < len(self.ingredients):
            del self.ingredients[index]

    # ------------------------------------------------------------------
    # Options and choices
    # ------------------------------------------------------------------

    def add_option(self, name: str, required: bool = False, allow_multiple_choices: bool = False) -> CustomizationOption:
        option = CustomizationOption(
            id=str(uuid.uuid4()),
            name=name,
            required=required,
            allow_multiple_choices=allow_multiple_choices,
        )
        self.customization_options.append(option)
        return option

    def remove_option(self, index: int) -> None:
        if 0 <= index < len(self.customization_options):
            del self.customization_options[index]

    def add_choice(self, option_index: int, name: str, price: Optional[Decimal] = None, **extra) -> Optional[CustomizationChoice]:
        if not 0 <= option_index < len(self.customization_options):
            return None
        choice = CustomizationChoice(id=str(uuid.uuid4()), name=name, price=price, **extra)
        self.customization_options[option_index].choices.append(choice)
        return choice

    def remove_choice(self, option_index: int, choice_index: int) -> None:
        if not 0 <= option_index < len(self.customization_options):
            return
        choices = self.customization_options[option_index].choices
        if 0 <= choice_index < len(choices):
            del choices[choice_index]

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------

    def add_size(self, name: str, abbreviation: str, additional_price: Decimal = Decimal("0"), is_default: bool = False) -> Size:
        if is_default:
            self.sizes = [s.model_copy(update={"is_default": False}) for s in self.sizes]
        size = Size(
            id=str(uuid.uuid4()),
            name=name,
            abbreviation=abbreviation,
            additional_price=additional_price,
            is_default=is_default or not self.sizes,
            order=len(self.sizes),
        )
        self.sizes.append(size)
        return size

    def remove_size(self, index: int) -> None:
        if 0 <= index < len(self.sizes):
            del self.sizes[index]

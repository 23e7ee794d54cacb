"""
Item customization and live price calculation for the item detail screen.

Price of one unit:
    base price (or legacy size multiplier)
    + selected size surcharge
    + options: choice price plus extra units above the default quantity
    + ingredients: units above the free amount times the unit price
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from domain.cart import (
    CartCustomization,
    CartItem,
    ChoiceSelection,
    IngredientSelection,
    OptionSelection,
    SizeSelection,
)
from domain.schemas.menu_schemas import (
    CustomizationChoice,
    CustomizationOption,
    Ingredient,
    MenuItem,
    Size,
)

logger = logging.getLogger("nidus.customization")

# Used when an item has no size list but the screen still offers S/M/L.
LEGACY_SIZE_MULTIPLIERS = {
    "S": Decimal("0.8"),
    "M": Decimal("1.0"),
    "L": Decimal("1.2"),
}

CENT = Decimal("0.01")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def default_quantity(choice: CustomizationChoice) -> int:
    return choice.default_quantity if choice.default_quantity is not None else 1


def initial_quantity(choice: CustomizationChoice) -> int:
    return default_quantity(choice) if choice.allow_quantity else 1


def choice_extra(choice: CustomizationChoice, quantity: int) -> Decimal:
    """Price added by a selected choice at the given quantity"""
    if choice.price is None:
        return Decimal("0")
    extra = choice.price
    if (
        choice.allow_quantity
        and choice.default_quantity is not None
        and choice.price_per_additional_unit
        and quantity > choice.default_quantity
    ):
        extra += (quantity - choice.default_quantity) * choice.price_per_additional_unit
    return extra


def ingredient_extra(ingredient: Ingredient, amount: float) -> Decimal:
    """Price of the amount above the free allowance; no allowance means all of it is charged"""
    free = ingredient.free_amount or 0
    if not ingredient.price_per_unit or amount <= free:
        return Decimal("0")
    return _dec(amount - free) * ingredient.price_per_unit


class ItemCustomizer:
    """Selections for one menu item and the resulting price"""

    def __init__(self, menu_item: MenuItem, coffee_shop_id: str):
        self.menu_item = menu_item
        self.coffee_shop_id = coffee_shop_id
        self.quantity = 1
        self.selected_size: Optional[Size] = menu_item.default_size
        self.size_multiplier = Decimal("1")
        self.ingredient_amounts: Dict[str, float] = {
            ingredient.key: ingredient.amount for ingredient in menu_item.customizable_ingredients
        }
        # option id -> {choice id: quantity}
        self.selected_choices: Dict[str, Dict[str, int]] = {}
        for option in menu_item.customization_options or []:
            if option.required and option.choices:
                first = option.choices[0]
                self.selected_choices[option.id] = {first.id: initial_quantity(first)}

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _option(self, option_id: str) -> Optional[CustomizationOption]:
        return next(
            (o for o in self.menu_item.customization_options or [] if o.id == option_id),
            None,
        )

    def _ingredient(self, key: str) -> Optional[Ingredient]:
        return next((i for i in self.menu_item.customizable_ingredients if i.key == key), None)

    def is_selected(self, option_id: str, choice_id: str) -> bool:
        return choice_id in self.selected_choices.get(option_id, {})

    # ------------------------------------------------------------------
    # Selection changes
    # ------------------------------------------------------------------

    def select_size(self, abbreviation: str) -> None:
        """Pick a size by abbreviation; unknown ones fall back to S/M/L multipliers"""
        size = next(
            (s for s in self.menu_item.sizes or [] if s.abbreviation == abbreviation),
            None,
        )
        if size is not None:
            self.selected_size = size
            self.size_multiplier = Decimal("1")
            return
        self.selected_size = None
        self.size_multiplier = LEGACY_SIZE_MULTIPLIERS.get(abbreviation.upper(), Decimal("1"))

    def toggle_choice(self, option_id: str, choice_id: str) -> None:
        option = self._option(option_id)
        choice = option.choice(choice_id) if option else None
        if choice is None:
            logger.debug("Unknown choice %s/%s", option_id, choice_id)
            return

        selected = self.selected_choices.setdefault(option.id, {})
        if choice.id in selected:
            # A required option keeps at least one choice.
            if option.required and len(selected) == 1:
                return
            del selected[choice.id]
            return
        if not option.allow_multiple_choices:
            selected.clear()
        selected[choice.id] = initial_quantity(choice)

    def set_choice_quantity(self, option_id: str, choice_id: str, quantity: int) -> None:
        option = self._option(option_id)
        choice = option.choice(choice_id) if option else None
        if choice is None or not self.is_selected(option_id, choice_id):
            return
        quantity = max(1, quantity)
        if choice.max_quantity is not None:
            quantity = min(quantity, choice.max_quantity)
        self.selected_choices[option_id][choice_id] = quantity

    def set_ingredient_amount(self, key: str, amount: float) -> None:
        ingredient = self._ingredient(key)
        if ingredient is None:
            return
        if ingredient.min_amount is not None:
            amount = max(amount, ingredient.min_amount)
        if ingredient.max_amount is not None:
            amount = min(amount, ingredient.max_amount)
        self.ingredient_amounts[key] = amount

    def set_quantity(self, quantity: int) -> None:
        self.quantity = max(1, quantity)

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @property
    def base_price(self) -> Decimal:
        return (self.menu_item.price * self.size_multiplier).quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def size_price(self) -> Decimal:
        return self.selected_size.additional_price if self.selected_size else Decimal("0")

    @property
    def options_price(self) -> Decimal:
        total = Decimal("0")
        for option in self.menu_item.customization_options or []:
            for choice_id, quantity in self.selected_choices.get(option.id, {}).items():
                choice = option.choice(choice_id)
                if choice is not None:
                    total += choice_extra(choice, quantity)
        return total

    @property
    def ingredients_price(self) -> Decimal:
        total = Decimal("0")
        for ingredient in self.menu_item.customizable_ingredients:
            amount = self.ingredient_amounts.get(ingredient.key, ingredient.amount)
            total += ingredient_extra(ingredient, amount)
        return total

    @property
    def current_price(self) -> Decimal:
        """Price of one unit with every selection applied"""
        return self.base_price + self.size_price + self.options_price + self.ingredients_price

    @property
    def total_price(self) -> Decimal:
        return self.current_price * self.quantity

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def customization_snapshot(self) -> CartCustomization:
        size = None
        if self.selected_size is not None:
            size = SizeSelection(
                id=self.selected_size.id,
                name=self.selected_size.name,
                abbreviation=self.selected_size.abbreviation,
                additional_price=self.selected_size.additional_price,
            )

        ingredients = [
            IngredientSelection(
                id=ingredient.key,
                name=ingredient.name,
                amount=self.ingredient_amounts.get(ingredient.key, ingredient.amount),
            )
            for ingredient in self.menu_item.customizable_ingredients
        ]

        options = []
        for option in self.menu_item.customization_options or []:
            choices = []
            for choice_id, quantity in self.selected_choices.get(option.id, {}).items():
                choice = option.choice(choice_id)
                if choice is None:
                    continue
                choices.append(
                    ChoiceSelection(
                        id=choice.id,
                        name=choice.name,
                        quantity=quantity,
                        price=choice_extra(choice, quantity),
                    )
                )
            if choices:
                options.append(OptionSelection(id=option.id, name=option.name, choices=choices))

        return CartCustomization(size=size, ingredients=ingredients, options=options)

    def build_cart_item(self, quantity: Optional[int] = None) -> CartItem:
        if quantity is not None:
            self.set_quantity(quantity)
        customization = self.customization_snapshot()
        if self.selected_size is not None:
            size_label = self.selected_size.abbreviation
        elif self.size_multiplier != 1:
            size_label = next(
                (k for k, v in LEGACY_SIZE_MULTIPLIERS.items() if v == self.size_multiplier),
                None,
            )
        else:
            size_label = None
        return CartItem.from_menu_item(
            self.menu_item,
            coffee_shop_id=self.coffee_shop_id,
            quantity=self.quantity,
            selected_size=size_label,
            customization=None if customization.is_empty else customization,
            customization_price=self.current_price - self.menu_item.price,
        )

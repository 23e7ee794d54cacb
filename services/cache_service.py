"""
In-memory name caches used when order payloads only carry ids.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from domain.schemas.coffee_shop_schemas import CoffeeShop
from domain.schemas.menu_schemas import MenuGroup, MenuItem
from domain.schemas.order_history_schemas import OrderHistory

logger = logging.getLogger("nidus.cache")


class CoffeeShopCache:
    """Coffee shop id -> (name, address)"""

    def __init__(self):
        self._shops: Dict[str, Tuple[str, Optional[str]]] = {}

    def put(self, shop_id: str, name: str, address: Optional[str] = None) -> None:
        self._shops[shop_id] = (name, address)

    def put_shops(self, shops: Iterable[CoffeeShop]) -> None:
        for shop in shops:
            self.put(shop.id, shop.name, shop.address)

    def get_name(self, shop_id: str) -> Optional[str]:
        entry = self._shops.get(shop_id)
        return entry[0] if entry else None

    def get_address(self, shop_id: str) -> Optional[str]:
        entry = self._shops.get(shop_id)
        return entry[1] if entry else None

    def clear(self) -> None:
        self._shops.clear()

    def __len__(self) -> int:
        return len(self._shops)


class CustomizationNameCache:
    """Ingredient and option choice names keyed by id"""

    def __init__(self):
        self.ingredient_names: Dict[str, str] = {}
        self.option_names: Dict[str, str] = {}

    def register_menu_item(self, item: MenuItem) -> None:
        for ingredient in item.ingredients or []:
            if ingredient.id:
                self.ingredient_names[ingredient.id] = ingredient.name
        for option in item.customization_options or []:
            self.option_names[option.id] = option.name
            for choice in option.choices:
                self.option_names[choice.id] = choice.name

    def register_menu(self, groups: Iterable[MenuGroup]) -> None:
        for group in groups:
            for item in group.menu_items or []:
                self.register_menu_item(item)

    def register_orders(self, orders: Iterable[OrderHistory]) -> None:
        """Pick up names from the customization breakdown of past orders"""
        for order in orders:
            for item in order.items:
                details = item.customization_details
                if details is None:
                    continue
                for ingredient in details.ingredients or []:
                    if ingredient.id:
                        self.ingredient_names[ingredient.id] = ingredient.name
                for option in details.options or []:
                    for choice in option.choices or []:
                        if choice.id:
                            self.option_names[choice.id] = choice.name

    def get_ingredient_name(self, ingredient_id: str) -> Optional[str]:
        return self.ingredient_names.get(ingredient_id)

    def get_option_name(self, option_id: str) -> Optional[str]:
        return self.option_names.get(option_id)

    def clear(self) -> None:
        self.ingredient_names.clear()
        self.option_names.clear()


# Shared caches
coffee_shop_cache = CoffeeShopCache()
customization_name_cache = CustomizationNameCache()

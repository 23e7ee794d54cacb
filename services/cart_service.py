"""
Cart service: the single shared cart, persisted after every change.
"""

import logging
from decimal import Decimal
from typing import Callable, List, Optional

from domain.cart import Cart, CartItem
from repositories.cart_repository import CartRepository

logger = logging.getLogger("nidus.cart")

CartListener = Callable[[Cart], None]


class CartService:
    """Owns the cart, saves it through the repository and notifies listeners"""

    def __init__(self, repository: Optional[CartRepository] = None):
        self.repository = repository
        self.cart: Cart = (repository.load() if repository else None) or Cart()
        self._listeners: List[CartListener] = []

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        if self.repository is not None:
            self.repository.save(self.cart)
        for listener in list(self._listeners):
            listener(self.cart)

    @property
    def items(self) -> List[CartItem]:
        return self.cart.items

    @property
    def item_count(self) -> int:
        return self.cart.item_count

    @property
    def total_price(self) -> Decimal:
        return self.cart.total_price

    def can_add_item_from(self, coffee_shop_id: str) -> bool:
        return self.cart.can_add_item_from(coffee_shop_id)

    def add_item(self, item: CartItem) -> bool:
        """Add an item; returns False when the cart holds another shop's items"""
        if not self.cart.add_item(item):
            logger.info(
                "Rejected item %s from shop %s; cart belongs to %s",
                item.menu_item_id,
                item.coffee_shop_id,
                self.cart.coffee_shop_id,
            )
            return False
        self._changed()
        return True

    def update_quantity(self, item_id: str, quantity: int) -> None:
        self.cart.update_quantity(item_id, quantity)
        self._changed()

    def remove_item(self, item_id: str) -> None:
        self.cart.remove_item(item_id)
        self._changed()

    def remove_item_at(self, index: int) -> None:
        self.cart.remove_item_at(index)
        self._changed()

    def clear(self) -> None:
        self.cart.clear()
        self._changed()

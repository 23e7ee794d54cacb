"""
Cart Repository - persisted cart contents
"""

import logging
from typing import Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.cart import Cart
from domain.models import StoredCart

CART_KEY = "nidus_cart"

logger = logging.getLogger("nidus.cart")


class CartRepository(BaseRepository[StoredCart]):
    """Serializes the cart as JSON under a single key"""

    def __init__(self, db: Session, cart_key: str = CART_KEY):
        super().__init__(db, StoredCart)
        self.cart_key = cart_key

    def load(self) -> Optional[Cart]:
        row = self.get_by_id(self.cart_key)
        if row is None:
            return None
        try:
            return Cart.model_validate_json(row.payload)
        except ValidationError as exc:
            logger.warning("Discarding unreadable stored cart: %s", exc)
            return None

    def save(self, cart: Cart) -> None:
        payload = cart.model_dump_json(by_alias=True)
        row = self.get_by_id(self.cart_key)
        if row is None:
            self.create(
                StoredCart(cart_key=self.cart_key, coffee_shop_id=cart.coffee_shop_id, payload=payload)
            )
        else:
            row.coffee_shop_id = cart.coffee_shop_id
            row.payload = payload
            self.update(row)

    def delete_cart(self) -> bool:
        return self.delete(self.cart_key)

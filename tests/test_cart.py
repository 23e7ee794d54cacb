"""
Tests for the cart: merge rules, single-shop constraint, persistence and listeners.
"""

from decimal import Decimal

from sqlalchemy.orm import Session

from domain.cart import Cart, CartCustomization, SizeSelection
from repositories.cart_repository import CartRepository
from services.cart_service import CartService
from test_fixtures import db_session, make_cart_item


# =============================================================================
# CART MODEL
# =============================================================================


def test_same_item_merges_into_one_line():
    """
    Test Cart.add_item() merging.

    Verifies:
    - Adding an identical item increases quantity
    - item_count and total_price follow
    """
    cart = Cart()
    assert cart.add_item(make_cart_item(quantity=1))
    assert cart.add_item(make_cart_item(quantity=2))
    assert len(cart.items) == 1
    assert cart.item_count == 3
    assert cart.total_price == Decimal("135")
    assert cart.formatted_total_price == "135 ₴"


def test_different_customization_is_a_new_line():
    """
    Test that customization is part of the merge key.

    Verifies:
    - Same menu item with another size is kept separately
    """
    small = CartCustomization(size=SizeSelection(id="s", name="Small", abbreviation="S"))
    large = CartCustomization(
        size=SizeSelection(id="l", name="Large", abbreviation="L", additional_price=Decimal("20"))
    )
    cart = Cart()
    cart.add_item(make_cart_item(selected_size="S", customization=small))
    cart.add_item(make_cart_item(selected_size="L", customization=large, customization_price=Decimal("20")))
    assert len(cart.items) == 2
    assert cart.total_price == Decimal("110")


def test_items_from_another_shop_are_rejected():
    """
    Test the single-shop constraint.

    Verifies:
    - An item from another shop is not added
    - The cart keeps its shop
    """
    cart = Cart()
    cart.add_item(make_cart_item(coffee_shop_id="shop-1"))
    assert not cart.can_add_item_from("shop-2")
    assert not cart.add_item(make_cart_item(coffee_shop_id="shop-2"))
    assert cart.coffee_shop_id == "shop-1"
    assert len(cart.items) == 1


def test_removing_last_item_resets_shop():
    """
    Test Cart removal helpers.

    Verifies:
    - remove_item_at ignores bad indexes
    - Removing the last item clears coffee_shop_id
    - update_quantity never goes below one
    """
    cart = Cart()
    item = make_cart_item()
    cart.add_item(item)
    cart.update_quantity(item.id, 0)
    assert cart.items[0].quantity == 1

    cart.remove_item_at(5)
    assert len(cart.items) == 1
    cart.remove_item(item.id)
    assert cart.is_empty
    assert cart.coffee_shop_id is None
    assert cart.can_add_item_from("shop-2")


# =============================================================================
# CART SERVICE AND PERSISTENCE
# =============================================================================


def test_cart_survives_restart(db_session: Session):
    """
    Test CartService persistence through CartRepository.

    Verifies:
    - Every change is saved
    - A new service instance loads the saved cart
    """
    service = CartService(CartRepository(db_session))
    service.add_item(make_cart_item(quantity=2))
    service.add_item(make_cart_item(menu_item_id="croissant-1", name="Croissant", price="55"))

    restored = CartService(CartRepository(db_session))
    assert restored.item_count == 3
    assert restored.total_price == Decimal("145")
    assert restored.cart.coffee_shop_id == "shop-1"


def test_clear_persists_empty_cart(db_session: Session):
    """
    Test CartService.clear().

    Verifies:
    - The stored cart is empty after clearing
    """
    service = CartService(CartRepository(db_session))
    service.add_item(make_cart_item())
    service.clear()
    assert CartService(CartRepository(db_session)).cart.is_empty


def test_delete_cart_removes_stored_row(db_session: Session):
    """
    Test CartRepository.delete_cart().

    Verifies:
    - The stored row is removed and load() returns None
    - Deleting again reports nothing to delete
    """
    repository = CartRepository(db_session)
    repository.save(Cart())
    assert repository.delete_cart()
    assert repository.load() is None
    assert not repository.delete_cart()


def test_unreadable_stored_cart_is_discarded(db_session: Session):
    """
    Test CartRepository.load() with a corrupted row.

    Verifies:
    - Garbage payload loads as None
    - CartService starts with an empty cart
    """
    repository = CartRepository(db_session)
    repository.save(Cart())
    row = repository.get_by_id(repository.cart_key)
    row.payload = "{not json"
    repository.update(row)

    assert repository.load() is None
    assert CartService(repository).cart.is_empty


def test_listeners_are_notified_and_can_unsubscribe():
    """
    Test CartService.subscribe().

    Verifies:
    - Listeners receive the cart after each change
    - Unsubscribed listeners are no longer called
    """
    service = CartService()
    counts = []
    unsubscribe = service.subscribe(lambda cart: counts.append(cart.item_count))
    service.add_item(make_cart_item())
    service.add_item(make_cart_item())
    unsubscribe()
    service.clear()
    assert counts == [1, 2]


def test_rejected_item_does_not_notify():
    """
    Test CartService.add_item() with an item from another shop.

    Verifies:
    - Returns False
    - Listeners are not called
    """
    service = CartService()
    service.add_item(make_cart_item(coffee_shop_id="shop-1"))
    calls = []
    service.subscribe(calls.append)
    assert not service.add_item(make_cart_item(coffee_shop_id="shop-2"))
    assert calls == []

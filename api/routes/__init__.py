"""API routes package"""

from . import auth, coffee_shops, health, menu_items, orders, uploads, users

__all__ = ["auth", "coffee_shops", "health", "menu_items", "orders", "uploads", "users"]

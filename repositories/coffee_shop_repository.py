"""
Coffee Shop Repository - shops, their menus and ownership
"""

from typing import Any, Dict, List, Optional

from repositories.base import ApiRepository
from domain.schemas.coffee_shop_schemas import CoffeeShop, CoffeeShopCreate, OwnerAssignment
from domain.schemas.menu_schemas import MenuGroup


class CoffeeShopRepository(ApiRepository):
    def get_all(self) -> List[CoffeeShop]:
        return self.api.fetch("/coffee-shops/find-all", List[CoffeeShop])

    def get_by_id(self, coffee_shop_id: str) -> CoffeeShop:
        return self.api.fetch(f"/coffee-shops/{coffee_shop_id}", CoffeeShop)

    def get_my(self) -> List[CoffeeShop]:
        """Shops owned by the signed-in user"""
        return self.api.fetch("/coffee-shops/my-shops", List[CoffeeShop])

    def get_menu(self, coffee_shop_id: str) -> List[MenuGroup]:
        """Menu groups with their items embedded"""
        return self.api.fetch(f"/coffee-shops/{coffee_shop_id}/menu", List[MenuGroup])

    def search(self, address: str) -> List[CoffeeShop]:
        return self.api.fetch(
            "/coffee-shops/search", List[CoffeeShop], params={"address": address}
        )

    def create(self, name: str, address: Optional[str] = None) -> CoffeeShop:
        return self.api.post(
            "/coffee-shops/create", CoffeeShopCreate(name=name, address=address), CoffeeShop
        )

    def update(self, coffee_shop_id: str, params: Dict[str, Any]) -> CoffeeShop:
        """Partial update; only the keys present in params are changed"""
        return self.api.patch(f"/coffee-shops/{coffee_shop_id}", params, CoffeeShop)

    def delete(self, coffee_shop_id: str) -> None:
        self.api.delete_without_response(f"/coffee-shops/{coffee_shop_id}")

    def assign_owner(self, coffee_shop_id: str, user_id: str) -> CoffeeShop:
        return self.api.patch(
            f"/coffee-shops/{coffee_shop_id}/owner",
            OwnerAssignment(owner_id=user_id),
            CoffeeShop,
        )

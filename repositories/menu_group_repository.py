"""
Menu Group Repository - menu sections of a coffee shop
"""

from typing import List, Optional

from repositories.base import ApiRepository
from domain.schemas.menu_schemas import MenuGroup, MenuGroupCreate, MenuGroupUpdate


class MenuGroupRepository(ApiRepository):
    @staticmethod
    def _base(coffee_shop_id: str) -> str:
        return f"/coffee-shops/{coffee_shop_id}/menu-groups"

    def get_groups(self, coffee_shop_id: str) -> List[MenuGroup]:
        return self.api.fetch(self._base(coffee_shop_id), List[MenuGroup])

    def get_group_with_items(self, coffee_shop_id: str, group_id: str) -> MenuGroup:
        return self.api.fetch(f"{self._base(coffee_shop_id)}/{group_id}", MenuGroup)

    def create(self, coffee_shop_id: str, name: str, description: Optional[str] = None, display_order: int = 0) -> MenuGroup:
        request = MenuGroupCreate(
            name=name,
            description=description,
            display_order=display_order,
            coffee_shop_id=coffee_shop_id,
        )
        group = self.api.post(self._base(coffee_shop_id), request, MenuGroup)
        if not group.coffee_shop_id:
            group.coffee_shop_id = coffee_shop_id
        return group

    def update(
        self,
        coffee_shop_id: str,
        group_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> MenuGroup:
        request = MenuGroupUpdate(name=name, description=description, display_order=display_order)
        return self.api.patch(f"{self._base(coffee_shop_id)}/{group_id}", request, MenuGroup)

    def delete(self, coffee_shop_id: str, group_id: str) -> None:
        self.api.delete_without_response(f"{self._base(coffee_shop_id)}/{group_id}")

    def update_display_order(self, coffee_shop_id: str, group_id: str, order: int) -> MenuGroup:
        return self.api.put(
            f"{self._base(coffee_shop_id)}/{group_id}/display-order",
            None,
            MenuGroup,
            params={"order": order},
        )

"""
Menu browsing and administration.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from domain.menu_item_form import MenuItemForm
from domain.schemas.auth_schemas import ImageUpload
from domain.schemas.menu_schemas import MenuGroup, MenuItem
from repositories import (
    CoffeeShopRepository,
    MenuGroupRepository,
    MenuItemRepository,
    UploadRepository,
)
from services.base_service import BaseService
from services.cache_service import CustomizationNameCache, customization_name_cache


def sort_groups(groups: List[MenuGroup]) -> List[MenuGroup]:
    return sorted(groups, key=lambda g: (g.display_order, g.name))


class MenuService(BaseService):
    """Menu of one coffee shop: groups, their items and CRUD for both"""

    def __init__(
        self,
        coffee_shop_id: str,
        coffee_shop_repository: CoffeeShopRepository,
        group_repository: Optional[MenuGroupRepository] = None,
        item_repository: Optional[MenuItemRepository] = None,
        upload_repository: Optional[UploadRepository] = None,
        name_cache: Optional[CustomizationNameCache] = None,
    ):
        super().__init__("nidus.menu")
        api = coffee_shop_repository.api
        self.coffee_shop_id = coffee_shop_id
        self.coffee_shop_repository = coffee_shop_repository
        self.group_repository = group_repository or MenuGroupRepository(api)
        self.item_repository = item_repository or MenuItemRepository(api)
        self.upload_repository = upload_repository or UploadRepository(api)
        self.name_cache = name_cache if name_cache is not None else customization_name_cache
        self.menu_groups: List[MenuGroup] = []
        self.items_by_group: Dict[str, List[MenuItem]] = {}

    # ------------------------------------------------------------------
    # Customer menu
    # ------------------------------------------------------------------

    def load_menu(self) -> bool:
        """Load groups with embedded items, sorted by display order"""
        with self.operation("load_menu"):
            groups = sort_groups(self.coffee_shop_repository.get_menu(self.coffee_shop_id))
            self.menu_groups = groups
            self.items_by_group = {g.id: list(g.menu_items or []) for g in groups}
            self.name_cache.register_menu(groups)
            return True
        return False

    def available_items(self, group_id: str) -> List[MenuItem]:
        return [i for i in self.items_by_group.get(group_id, []) if i.is_available]

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def load_groups(self) -> bool:
        with self.operation("load_groups"):
            self.menu_groups = sort_groups(self.group_repository.get_groups(self.coffee_shop_id))
            return True
        return False

    def create_group(self, name: str, description: Optional[str] = None, display_order: Optional[int] = None) -> Optional[MenuGroup]:
        if not name.strip():
            self.fail("Group name is required")
            return None
        order = display_order if display_order is not None else len(self.menu_groups)
        with self.operation("create_group"):
            group = self.group_repository.create(self.coffee_shop_id, name.strip(), description or None, order)
            self.menu_groups = sort_groups(self.menu_groups + [group])
            self.success_message = f'Group "{group.name}" created'
            return group
        return None

    def update_group(self, group_id: str, name: Optional[str] = None, description: Optional[str] = None, display_order: Optional[int] = None) -> Optional[MenuGroup]:
        with self.operation("update_group"):
            group = self.group_repository.update(self.coffee_shop_id, group_id, name, description, display_order)
            self.menu_groups = sort_groups([group if g.id == group_id else g for g in self.menu_groups])
            return group
        return None

    def delete_group(self, group_id: str) -> bool:
        with self.operation("delete_group"):
            self.group_repository.delete(self.coffee_shop_id, group_id)
            self.menu_groups = [g for g in self.menu_groups if g.id != group_id]
            self.items_by_group.pop(group_id, None)
            return True
        return False

    def move_group(self, group_id: str, display_order: int) -> bool:
        with self.operation("move_group"):
            group = self.group_repository.update_display_order(self.coffee_shop_id, group_id, display_order)
            self.menu_groups = sort_groups([group if g.id == group_id else g for g in self.menu_groups])
            return True
        return False

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def load_items(self, group_id: str, min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None) -> List[MenuItem]:
        with self.operation("load_items"):
            if min_price is None and max_price is None:
                items = self.item_repository.get_items(group_id)
            else:
                items = self.item_repository.get_filtered(group_id, min_price, max_price)
            self.items_by_group[group_id] = items
            return items
        return []

    def _store_item(self, group_id: str, item: MenuItem) -> None:
        items = self.items_by_group.setdefault(group_id, [])
        for index, existing in enumerate(items):
            if existing.id == item.id:
                items[index] = item
                return
        items.append(item)

    def create_item(self, group_id: str, form: MenuItemForm) -> Optional[MenuItem]:
        request = form.to_create_request(group_id)
        if request is None or not form.name.strip():
            self.fail("Enter a name and a valid price")
            return None
        with self.operation("create_item"):
            item = self.item_repository.create(group_id, request)
            self._store_item(group_id, item)
            self.success_message = f'"{item.name}" added to the menu'
            return item
        return None

    def update_item(self, group_id: str, item_id: str, form: MenuItemForm) -> Optional[MenuItem]:
        payload = form.to_update_payload()
        if payload is None:
            self.fail("Enter a valid price")
            return None
        with self.operation("update_item"):
            item = self.item_repository.update(group_id, item_id, payload)
            self._store_item(group_id, item)
            return item
        return None

    def delete_item(self, group_id: str, item_id: str) -> bool:
        with self.operation("delete_item"):
            self.item_repository.delete(group_id, item_id)
            self.items_by_group[group_id] = [
                i for i in self.items_by_group.get(group_id, []) if i.id != item_id
            ]
            return True
        return False

    def set_item_availability(self, group_id: str, item_id: str, available: bool) -> Optional[MenuItem]:
        with self.operation("set_item_availability"):
            item = self.item_repository.update_availability(group_id, item_id, available)
            self._store_item(group_id, item)
            return item
        return None

    def upload_item_image(self, group_id: str, item_id: str, image: ImageUpload) -> Optional[str]:
        with self.operation("upload_item_image"):
            result = self.upload_repository.upload_menu_item_image(item_id, image)
            if result.url:
                item = self.item_repository.get_item(group_id, item_id)
                self._store_item(group_id, item)
            return result.url
        return None

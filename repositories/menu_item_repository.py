"""
Menu Item Repository - items of a menu group
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.exceptions import DecodingFailedError
from repositories.base import ApiRepository
from domain.schemas.menu_schemas import MenuItem, MenuItemCreate

logger = logging.getLogger("nidus.menu")


class MenuItemRepository(ApiRepository):
    @staticmethod
    def _base(group_id: str) -> str:
        return f"/menu-groups/{group_id}/items"

    def get_items(self, group_id: str) -> List[MenuItem]:
        return self.api.fetch(self._base(group_id), List[MenuItem])

    def get_item(self, group_id: str, item_id: str) -> MenuItem:
        return self.api.fetch(f"{self._base(group_id)}/{item_id}", MenuItem)

    def get_filtered(self, group_id: str, min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None) -> List[MenuItem]:
        params = {
            "minPrice": str(min_price) if min_price is not None else None,
            "maxPrice": str(max_price) if max_price is not None else None,
        }
        return self.api.fetch(f"{self._base(group_id)}/filter", List[MenuItem], params=params)

    def create(self, group_id: str, request: MenuItemCreate) -> MenuItem:
        item = self.api.post(self._base(group_id), request, MenuItem)
        if not item.menu_group_id:
            item.menu_group_id = group_id
        return item

    def update(self, group_id: str, item_id: str, updates: Dict[str, Any]) -> MenuItem:
        """Partial update; when the response cannot be decoded the item is fetched again"""
        try:
            return self.api.patch(f"{self._base(group_id)}/{item_id}", updates, MenuItem)
        except DecodingFailedError as exc:
            logger.warning("Update response for item %s not decodable, refetching: %s", item_id, exc)
            return self.get_item(group_id, item_id)

    def delete(self, group_id: str, item_id: str) -> None:
        self.api.delete_without_response(f"{self._base(group_id)}/{item_id}")

    def update_availability(self, group_id: str, item_id: str, available: bool) -> MenuItem:
        self.api.send_raw(
            "PATCH",
            f"{self._base(group_id)}/{item_id}/availability",
            params={"available": "true" if available else "false"},
        )
        return self.get_item(group_id, item_id)

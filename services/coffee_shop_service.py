"""
Coffee shop administration with role checks.
"""

from typing import Any, Dict, List, Optional

from app.exceptions import PermissionDeniedError, ServiceValidationError
from domain.schemas.auth_schemas import ImageUpload
from domain.schemas.coffee_shop_schemas import CoffeeShop, WorkingHoursPeriod
from domain.schemas.user_schemas import User
from domain.working_hours import WorkingHours
from repositories import CoffeeShopRepository, UploadRepository
from services import roles
from services.base_service import BaseService
from services.cache_service import CoffeeShopCache, coffee_shop_cache


class CoffeeShopService(BaseService):
    """
    Shop lists and CRUD for super admins and shop owners.

    Super admins see every shop; owners see the shops they own. Errors and
    confirmations are exposed through ``error`` and ``success_message``.
    """

    def __init__(
        self,
        repository: CoffeeShopRepository,
        current_user: Optional[User] = None,
        upload_repository: Optional[UploadRepository] = None,
        cache: Optional[CoffeeShopCache] = None,
    ):
        super().__init__("nidus.coffee_shops")
        self.repository = repository
        self.upload_repository = upload_repository or UploadRepository(repository.api)
        self.current_user = current_user
        self.cache = cache if cache is not None else coffee_shop_cache
        self.coffee_shops: List[CoffeeShop] = []
        self.my_coffee_shops: List[CoffeeShop] = []
        self.selected_coffee_shop: Optional[CoffeeShop] = None

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    @property
    def is_super_admin(self) -> bool:
        return roles.is_super_admin(self.current_user)

    @property
    def is_coffee_shop_owner(self) -> bool:
        return roles.is_coffee_shop_owner(self.current_user)

    def can_manage_coffee_shops(self) -> bool:
        return roles.can_manage_coffee_shops(self.current_user)

    def can_manage_coffee_shop(self, shop: CoffeeShop) -> bool:
        return roles.can_manage_coffee_shop(self.current_user, shop)

    def _find(self, coffee_shop_id: str) -> Optional[CoffeeShop]:
        for shop in self.coffee_shops + self.my_coffee_shops:
            if shop.id == coffee_shop_id:
                return shop
        return None

    def _require_manage(self, coffee_shop_id: str) -> None:
        shop = self._find(coffee_shop_id) or self.repository.get_by_id(coffee_shop_id)
        if not self.can_manage_coffee_shop(shop):
            raise PermissionDeniedError("You can only manage your own coffee shops")

    def _replace(self, updated: CoffeeShop) -> None:
        for shops in (self.coffee_shops, self.my_coffee_shops):
            for index, shop in enumerate(shops):
                if shop.id == updated.id:
                    shops[index] = updated
        if self.selected_coffee_shop and self.selected_coffee_shop.id == updated.id:
            self.selected_coffee_shop = updated
        self.cache.put(updated.id, updated.name, updated.address)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self) -> bool:
        """Load the shops visible to the current user's role"""
        if self.is_super_admin:
            return self.load_coffee_shops()
        if self.is_coffee_shop_owner:
            return self.load_my_coffee_shops()
        return False

    def load_coffee_shops(self) -> bool:
        with self.operation("load_coffee_shops"):
            self.coffee_shops = self.repository.get_all()
            self.cache.put_shops(self.coffee_shops)
            return True
        return False

    def load_my_coffee_shops(self) -> bool:
        with self.operation("load_my_coffee_shops"):
            self.my_coffee_shops = self.repository.get_my()
            self.cache.put_shops(self.my_coffee_shops)
            return True
        return False

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def create(self, name: str, address: Optional[str] = None) -> Optional[CoffeeShop]:
        if not self.can_manage_coffee_shops():
            self.fail("Creating coffee shops requires the coffee shop owner or super admin role")
            return None
        if not name.strip():
            self.fail("Coffee shop name is required")
            return None
        with self.operation("create_coffee_shop"):
            shop = self.repository.create(name.strip(), address or None)
            if self.is_super_admin:
                self.coffee_shops.append(shop)
            self.my_coffee_shops = self.repository.get_my()
            self.cache.put(shop.id, shop.name, shop.address)
            self.success_message = f'Coffee shop "{shop.name}" created'
            return shop
        return None

    def update(
        self,
        coffee_shop_id: str,
        params: Optional[Dict[str, Any]] = None,
        working_hours: Optional[Dict[str, WorkingHoursPeriod]] = None,
    ) -> Optional[CoffeeShop]:
        """Partially update a shop; working hours are validated before sending"""
        payload = dict(params or {})
        with self.operation("update_coffee_shop"):
            if working_hours is not None:
                schedule = WorkingHours(working_hours)
                ok, message = schedule.validate()
                if not ok:
                    raise ServiceValidationError(message)
                payload["workingHours"] = schedule.to_api_model()
            self._require_manage(coffee_shop_id)
            shop = self.repository.update(coffee_shop_id, payload)
            self._replace(shop)
            self.success_message = f'Coffee shop "{shop.name}" updated'
            return shop
        return None

    def delete(self, coffee_shop_id: str) -> bool:
        with self.operation("delete_coffee_shop"):
            self._require_manage(coffee_shop_id)
            existing = self._find(coffee_shop_id)
            name = existing.name if existing else "Coffee shop"
            self.repository.delete(coffee_shop_id)
            self.coffee_shops = [s for s in self.coffee_shops if s.id != coffee_shop_id]
            self.my_coffee_shops = [s for s in self.my_coffee_shops if s.id != coffee_shop_id]
            if self.selected_coffee_shop and self.selected_coffee_shop.id == coffee_shop_id:
                self.selected_coffee_shop = None
            self.success_message = f"{name} deleted"
            return True
        return False

    def assign_owner(self, coffee_shop_id: str, user_id: str) -> Optional[CoffeeShop]:
        if not self.is_super_admin:
            self.fail("Only administrators can assign coffee shop owners")
            return None
        with self.operation("assign_owner"):
            shop = self.repository.assign_owner(coffee_shop_id, user_id)
            self._replace(shop)
            self.success_message = f'Owner of "{shop.name}" assigned'
            return shop
        return None

    def upload_logo(self, coffee_shop_id: str, image: ImageUpload) -> Optional[str]:
        """Upload a logo and return its URL"""
        with self.operation("upload_logo"):
            self._require_manage(coffee_shop_id)
            result = self.upload_repository.upload_coffee_shop_logo(coffee_shop_id, image)
            existing = self._find(coffee_shop_id)
            if existing is not None and result.url:
                self._replace(existing.model_copy(update={"logo_url": result.url}))
            return result.url
        return None

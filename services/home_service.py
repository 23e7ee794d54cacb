"""
Home screen: all coffee shops and search by address.
"""

from typing import List, Optional

from domain.schemas.coffee_shop_schemas import CoffeeShop
from repositories import CoffeeShopRepository
from services.base_service import BaseService
from services.cache_service import CoffeeShopCache, coffee_shop_cache


class HomeService(BaseService):
    def __init__(self, repository: CoffeeShopRepository, cache: Optional[CoffeeShopCache] = None):
        super().__init__("nidus.home")
        self.repository = repository
        self.cache = cache if cache is not None else coffee_shop_cache
        self.coffee_shops: List[CoffeeShop] = []

    def load(self) -> bool:
        with self.operation("load_coffee_shops"):
            self.coffee_shops = self.repository.get_all()
            self.cache.put_shops(self.coffee_shops)
            return True
        return False

    def search(self, address: str) -> bool:
        """Search by address; a blank query reloads the full list"""
        if not address.strip():
            return self.load()
        with self.operation("search_coffee_shops"):
            self.coffee_shops = self.repository.search(address.strip())
            self.cache.put_shops(self.coffee_shops)
            return True
        return False

    def get_coffee_shop(self, coffee_shop_id: str) -> Optional[CoffeeShop]:
        with self.operation("get_coffee_shop"):
            shop = self.repository.get_by_id(coffee_shop_id)
            self.cache.put(shop.id, shop.name, shop.address)
            return shop
        return None

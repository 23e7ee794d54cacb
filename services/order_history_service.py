"""
Order history screen: paging, filter tabs, search and live status updates.
"""

from typing import Callable, List, Optional

from app.config import settings
from domain.enums import OrderHistoryFilter
from domain.schemas.order_history_schemas import OrderHistory
from repositories import OrderHistoryRepository
from services.base_service import BaseService
from services.cache_service import CustomizationNameCache, coffee_shop_cache
from services.order_events import OrderEvent, apply_event


def merge_newest_first(*pages: List[OrderHistory]) -> List[OrderHistory]:
    """Concatenate pages, dropping repeated ids, newest order first"""
    seen = set()
    merged = []
    for page in pages:
        for order in page:
            if order.id not in seen:
                seen.add(order.id)
                merged.append(order)
    return sorted(merged, key=lambda o: o.created_at, reverse=True)


class OrderHistoryService(BaseService):
    """
    Paged order history.

    Tab "all" shows active orders merged with the first history page; later
    pages come from history alone. "pending" reads the active orders endpoint,
    the remaining tabs read history filtered by status.
    """

    def __init__(
        self,
        repository: OrderHistoryRepository,
        page_size: Optional[int] = None,
        shop_name_lookup: Optional[Callable[[str], Optional[str]]] = None,
        name_cache: Optional[CustomizationNameCache] = None,
    ):
        super().__init__("nidus.order_history")
        self.repository = repository
        self.page_size = page_size or settings.order_history_page_size
        self.shop_name_lookup = shop_name_lookup or coffee_shop_cache.get_name
        self.name_cache = name_cache
        self.orders: List[OrderHistory] = []
        self.filter = OrderHistoryFilter.ALL
        self.search_text = ""
        self.current_page = 1
        self.has_more = True

    def _fetch_page(self, page: int) -> List[OrderHistory]:
        if self.filter is OrderHistoryFilter.ALL:
            if page == 1:
                active = self.repository.get_active(self.page_size, 1)
                history = self.repository.get_history(None, self.page_size, 1)
                self.has_more = len(history) == self.page_size
                return merge_newest_first(active, history)
            result = self.repository.get_history(None, self.page_size, page)
        elif self.filter is OrderHistoryFilter.PENDING:
            result = self.repository.get_active(self.page_size, page)
        else:
            result = self.repository.get_history(self.filter.statuses, self.page_size, page)
        self.has_more = len(result) == self.page_size
        return result

    def load(self, tab: Optional[OrderHistoryFilter] = None) -> bool:
        """Load the first page of the given (or current) tab"""
        if tab is not None:
            self.filter = tab
        with self.operation("load_orders"):
            self.current_page = 1
            self.orders = self._fetch_page(1)
            if self.name_cache is not None:
                self.name_cache.register_orders(self.orders)
            return True
        return False

    def refresh(self) -> bool:
        return self.load()

    def load_more(self) -> bool:
        if not self.has_more or self.is_loading:
            return False
        with self.operation("load_more_orders"):
            page = self.current_page + 1
            new_orders = self._fetch_page(page)
            known = {o.id for o in self.orders}
            self.orders.extend(o for o in new_orders if o.id not in known)
            self.current_page = page
            if self.name_cache is not None:
                self.name_cache.register_orders(new_orders)
            return True
        return False

    def set_search_text(self, text: str) -> None:
        self.search_text = text

    @property
    def filtered_orders(self) -> List[OrderHistory]:
        statuses = self.filter.statuses
        orders = [o for o in self.orders if statuses is None or o.status in statuses]
        query = self.search_text.strip().lower()
        if not query:
            return orders
        return [o for o in orders if self._matches(o, query)]

    def _matches(self, order: OrderHistory, query: str) -> bool:
        if query in order.order_number.lower():
            return True
        if query in order.display_coffee_shop_name(self.shop_name_lookup).lower():
            return True
        return any(query in item.name.lower() for item in order.items)

    def shop_name(self, order: OrderHistory) -> str:
        return order.display_coffee_shop_name(self.shop_name_lookup)

    def apply_event(self, event: OrderEvent) -> Optional[OrderHistory]:
        """Apply a realtime event to the matching loaded order"""
        for index, order in enumerate(self.orders):
            if order.id == event.order_id:
                updated = apply_event(order, event)
                self.orders[index] = updated
                self.log_info("Order updated", order_id=order.id, status=updated.status.value)
                return updated
        return None

    def get_order(self, order_id: str) -> Optional[OrderHistory]:
        with self.operation("get_order"):
            return self.repository.get_order(order_id)
        return None

"""
Tests for the order history screen and realtime order events.

History paging and tabs run against the sandbox; event decoding and
cancellation messages are tested on hand-built orders.
"""

from datetime import datetime, timezone

from domain.enums import OrderHistoryFilter, OrderStatus
from domain.schemas.order_schemas import OrderCreate, OrderItemRequest
from repositories import OrderHistoryRepository, OrderRepository
from services import CustomizationNameCache, OrderHistoryService
from services.order_events import (
    OrderCancellation,
    OrderStatusUpdate,
    apply_event,
    cancellation_message,
    parse_event,
)
from test_fixtures import (
    PODIL_SHOP_ID,
    customer_api,
    make_order_history,
    owner_api,
    sandbox_client,
)


def place_orders(customer_api, count, menu_item_id="item-espresso"):
    repository = OrderRepository(customer_api)
    return [
        repository.create(
            OrderCreate(
                coffee_shop_id=PODIL_SHOP_ID,
                items=[OrderItemRequest(menu_item_id=menu_item_id, quantity=1)],
            )
        )
        for _ in range(count)
    ]


def history_service(customer_api, **kwargs) -> OrderHistoryService:
    return OrderHistoryService(OrderHistoryRepository(customer_api), **kwargs)


# =============================================================================
# TABS AND PAGING
# =============================================================================


def test_tabs_split_active_and_finished(customer_api, owner_api):
    """
    Test OrderHistoryService.load() for every tab.

    Verifies:
    - "all" merges active and finished orders, newest first
    - "pending" shows only active orders
    - "completed" and "cancelled" show their status only
    """
    active, done, cancelled = place_orders(customer_api, 3)
    OrderRepository(owner_api).update_status(done.id, OrderStatus.COMPLETED)
    OrderRepository(customer_api).cancel(cancelled.id)

    service = history_service(customer_api)
    assert service.load(OrderHistoryFilter.ALL)
    assert [o.id for o in service.orders] == [cancelled.id, done.id, active.id]

    service.load(OrderHistoryFilter.PENDING)
    assert [o.id for o in service.filtered_orders] == [active.id]

    service.load(OrderHistoryFilter.COMPLETED)
    assert [o.id for o in service.filtered_orders] == [done.id]

    service.load(OrderHistoryFilter.CANCELLED)
    assert [o.status for o in service.filtered_orders] == [OrderStatus.CANCELLED]


def test_load_more_pages_through_history(customer_api, owner_api):
    """
    Test OrderHistoryService.load_more() with a small page size.

    Verifies:
    - Each page appends new orders only
    - has_more turns False on a short page
    - load_more() is a no-op once everything is loaded
    """
    orders = place_orders(customer_api, 5)
    for order in orders:
        OrderRepository(owner_api).update_status(order.id, OrderStatus.COMPLETED)

    service = history_service(customer_api, page_size=2)
    service.load(OrderHistoryFilter.COMPLETED)
    assert len(service.orders) == 2
    assert service.has_more

    assert service.load_more()
    assert service.load_more()
    assert service.current_page == 3
    assert len(service.orders) == 5
    assert not service.has_more
    assert not service.load_more()


def test_all_tab_later_pages_continue_history(customer_api, owner_api):
    """
    Test paging of the "all" tab.

    Verifies:
    - Page 2 holds the finished orders after the first history page
    """
    orders = place_orders(customer_api, 4)
    for order in orders:
        OrderRepository(owner_api).update_status(order.id, OrderStatus.COMPLETED)

    service = history_service(customer_api, page_size=2)
    service.load(OrderHistoryFilter.ALL)
    assert len(service.orders) == 2
    assert service.load_more()
    assert {o.id for o in service.orders} == {o.id for o in orders}


def test_search_and_shop_names(customer_api):
    """
    Test filtered_orders search.

    Verifies:
    - Order number matches case-insensitively
    - Embedded shop names and item names match
    """
    place_orders(customer_api, 2)
    place_orders(customer_api, 1, menu_item_id="item-latte")
    service = history_service(customer_api)
    service.load()

    service.set_search_text("n-0002")
    assert [o.order_number for o in service.filtered_orders] == ["N-0002"]

    service.set_search_text("PODIL")
    assert len(service.filtered_orders) == 3
    assert service.shop_name(service.orders[0]) == "Nidus Podil"

    service.set_search_text("latte")
    assert [o.order_number for o in service.filtered_orders] == ["N-0003"]


def test_shop_name_falls_back_to_lookup():
    """
    Test OrderHistoryService.shop_name() without an embedded shop.

    Verifies:
    - The lookup is used for the shop id
    - Unknown shops get a placeholder
    """
    service = OrderHistoryService(repository=None, shop_name_lookup={"shop-1": "Zerno"}.get)
    assert service.shop_name(make_order_history()) == "Zerno"
    assert service.shop_name(make_order_history(coffeeShopId="shop-9")) == "Unknown coffee shop"


def test_get_order_failure_sets_error(customer_api):
    """
    Test OrderHistoryService.get_order() with an unknown id.

    Verifies:
    - Returns None and records the server message
    """
    service = history_service(customer_api)
    assert service.get_order("order-missing") is None
    assert service.error == "Order order-missing not found"


def test_loaded_orders_register_customization_names(customer_api):
    """
    Test the name cache hook of load().

    Verifies:
    - Choice and ingredient names from order details are cached
    """
    repository = OrderRepository(customer_api)
    repository.create(
        OrderCreate.model_validate(
            {
                "coffeeShopId": PODIL_SHOP_ID,
                "items": [
                    {
                        "menuItemId": "item-latte",
                        "quantity": 1,
                        "customization": {
                            "selectedIngredients": {"ing-espresso": 2},
                            "selectedOptions": {"opt-milk": [{"choiceId": "choice-almond-milk", "quantity": 1}]},
                        },
                    }
                ],
            }
        )
    )
    names = CustomizationNameCache()
    service = history_service(customer_api, name_cache=names)
    service.load(OrderHistoryFilter.PENDING)
    assert names.get_option_name("choice-almond-milk") == "Almond milk"
    assert names.get_ingredient_name("ing-espresso") == "Espresso"


# =============================================================================
# REALTIME EVENTS
# =============================================================================


def test_parse_status_update():
    """
    Test parse_event() for orderStatusUpdated.

    Verifies:
    - camelCase payload is decoded
    - Status is an OrderStatus
    """
    event = parse_event(
        "orderStatusUpdated",
        {"orderId": "order-1", "newStatus": "ready", "previousStatus": "preparing", "orderNumber": "N-0001"},
    )
    assert isinstance(event, OrderStatusUpdate)
    assert event.new_status is OrderStatus.READY
    assert event.previous_status is OrderStatus.PREPARING


def test_parse_event_ignores_unknown_and_malformed():
    """
    Test parse_event() robustness.

    Verifies:
    - Unknown event names yield None
    - Missing required fields yield None
    - Unknown statuses yield None
    """
    assert parse_event("orderCreated", {"orderId": "order-1"}) is None
    assert parse_event("orderCancelled", {"reason": "no id"}) is None
    assert parse_event("orderStatusUpdated", {"orderId": "order-1", "newStatus": "teleported"}) is None


def test_apply_status_update():
    """
    Test apply_event() with status updates.

    Verifies:
    - Status is replaced on a copy
    - Completion time is taken from the event
    """
    order = make_order_history(status="preparing")
    finished_at = datetime(2025, 5, 5, 10, 30, tzinfo=timezone.utc)
    event = OrderStatusUpdate(order_id=order.id, new_status=OrderStatus.COMPLETED, updated_at=finished_at)

    updated = apply_event(order, event)
    assert updated.status is OrderStatus.COMPLETED
    assert updated.completed_at == finished_at
    assert order.status is OrderStatus.PREPARING


def test_apply_cancellation_event():
    """
    Test apply_event() with an orderCancelled event.

    Verifies:
    - Order becomes cancelled with actor and reason
    - cancellation_message() prefers the event reason
    """
    order = make_order_history(status="accepted")
    event = parse_event(
        "orderCancelled",
        {
            "orderId": order.id,
            "cancellationActor": "coffee_shop",
            "cancellationReason": "Out of oat milk",
            "refundAmount": "120.00",
        },
    )
    assert isinstance(event, OrderCancellation)

    cancelled = apply_event(order, event)
    assert cancelled.status is OrderStatus.CANCELLED
    assert cancelled.cancellation_actor == "coffee_shop"
    assert cancellation_message(cancelled, event) == "Out of oat milk"


def test_cancellation_message_fallbacks():
    """
    Test cancellation_message() without a reason in the event.

    Verifies:
    - Staff comment of a status update is used
    - Otherwise the order's own comment is used
    - Active orders have no message
    """
    cancelled = make_order_history(status="cancelled", cancellationReason="Closed early")
    update = OrderStatusUpdate(order_id=cancelled.id, new_status=OrderStatus.CANCELLED, staff_comment="Machine broke")
    assert cancellation_message(cancelled, update) == "Machine broke"
    assert cancellation_message(cancelled) == "Closed early"
    assert cancellation_message(make_order_history(status="ready")) is None


def test_service_applies_events_to_loaded_orders(customer_api, owner_api):
    """
    Test OrderHistoryService.apply_event().

    Verifies:
    - The matching loaded order is replaced
    - Events for unknown orders are ignored
    """
    (order,) = place_orders(customer_api, 1)
    service = history_service(customer_api)
    service.load(OrderHistoryFilter.PENDING)

    event = parse_event("orderStatusUpdated", {"orderId": order.id, "newStatus": "accepted"})
    assert service.apply_event(event).status is OrderStatus.ACCEPTED
    assert service.orders[0].status is OrderStatus.ACCEPTED

    stray = parse_event("orderStatusUpdated", {"orderId": "order-other", "newStatus": "ready"})
    assert service.apply_event(stray) is None

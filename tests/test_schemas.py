"""
Tests for decoding API payloads into the domain schemas.

The backend is inconsistent about dates and money: dates come in several
ISO-8601 flavours, amounts as numbers or numeric strings. These tests pin
down how each schema absorbs those differences.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.enums import OrderHistoryFilter, OrderStatus, PaymentStatus
from domain.menu_item_form import MenuItemForm
from domain.schemas.base import parse_datetime, to_decimal
from domain.schemas.coffee_shop_schemas import CoffeeShop
from domain.schemas.menu_schemas import MenuItem
from domain.schemas.order_history_schemas import OrderHistory
from domain.schemas.order_schemas import Order, OrderItem
from domain.schemas.user_schemas import ProfileUpdate, Role, User
from test_fixtures import make_menu_item, make_order_history


# =============================================================================
# DATES AND AMOUNTS
# =============================================================================


@pytest.mark.parametrize(
    "text",
    [
        "2025-05-03T14:05:00.123Z",
        "2025-05-03T14:05:00Z",
        "2025-05-03T14:05:00.123",
        "2025-05-03T14:05:00",
        "2025-05-03T14:05:00+00:00",
    ],
)
def test_parse_datetime_accepts_api_formats(text):
    """
    Test parse_datetime() with every date flavour the API sends.

    Verifies:
    - Result is timezone-aware UTC
    - Date and time of day are preserved
    """
    parsed = parse_datetime(text)
    assert parsed.tzinfo is not None
    assert (parsed.year, parsed.month, parsed.day, parsed.hour, parsed.minute) == (2025, 5, 3, 14, 5)


def test_parse_datetime_date_only_and_garbage():
    """
    Test parse_datetime() edge cases.

    Verifies:
    - A bare date parses as midnight
    - Unparseable text yields None
    """
    assert parse_datetime("2025-05-03") == datetime(2025, 5, 3, tzinfo=timezone.utc)
    assert parse_datetime("yesterday") is None
    assert parse_datetime("") is None


def test_malformed_date_falls_back_to_now():
    """
    Test that an unparseable createdAt does not fail decoding.

    Verifies:
    - Decoding succeeds
    - created_at is close to the current time
    """
    before = datetime.now(timezone.utc)
    order = make_order_history(createdAt="not a date")
    assert order.created_at >= before


def test_to_decimal_rejects_non_numbers():
    """
    Test to_decimal() conversions.

    Verifies:
    - Numbers and numeric strings convert exactly
    - Booleans, text and NaN raise ValueError
    """
    assert to_decimal(45) == Decimal("45")
    assert to_decimal(45.5) == Decimal("45.5")
    assert to_decimal("60.00") == Decimal("60.00")
    for bad in (True, "abc", "NaN", None):
        with pytest.raises(ValueError):
            to_decimal(bad)


# =============================================================================
# ORDERS
# =============================================================================


def test_order_item_price_as_string_or_number():
    """
    Test OrderItem price decoding.

    Verifies:
    - "60.50" and 60.5 decode to the same Decimal
    - A non-numeric price fails decoding
    """
    from_string = OrderItem.model_validate({"id": "1", "name": "Flat white", "price": "60.50"})
    from_number = OrderItem.model_validate({"id": "1", "name": "Flat white", "price": 60.5})
    assert from_string.price == from_number.price == Decimal("60.5")

    with pytest.raises(ValidationError):
        OrderItem.model_validate({"id": "1", "name": "Flat white", "price": "free"})


def test_order_decodes_camel_case_payload():
    """
    Test decoding of a full Order payload.

    Verifies:
    - camelCase keys map onto snake_case fields
    - Embedded coffee shop and status history decode
    """
    order = Order.model_validate(
        {
            "id": "order-7",
            "orderNumber": "N-0007",
            "coffeeShopId": "shop-1",
            "coffeeShop": {"id": "shop-1", "name": "Kavarnia"},
            "status": "preparing",
            "totalAmount": "130.00",
            "items": [{"id": "l1", "name": "Latte", "price": 65, "quantity": 2}],
            "statusHistory": [{"id": "h1", "status": "created", "createdAt": "2025-05-03T10:00:00Z"}],
            "isPaid": True,
            "unknownField": "ignored",
        }
    )
    assert order.status is OrderStatus.PREPARING
    assert order.total_amount == Decimal("130.00")
    assert order.coffee_shop.name == "Kavarnia"
    assert order.items[0].total == Decimal("130")
    assert order.status_history[0].status is OrderStatus.CREATED


def test_order_history_malformed_amounts_become_zero():
    """
    Test lenient amounts in order history.

    Verifies:
    - A malformed totalAmount decodes as 0
    - A malformed finalPrice decodes as None and price is used instead
    """
    order = make_order_history(
        totalAmount="n/a",
        items=[{"id": "l1", "name": "Latte", "price": 70, "finalPrice": "??", "quantity": 1}],
    )
    assert order.total_amount == Decimal("0")
    assert order.items[0].final_price is None
    assert order.items[0].unit_price == Decimal("70")


def test_order_history_display_helpers():
    """
    Test display properties of OrderHistory.

    Verifies:
    - Status label, color and formatted total
    - Shop name resolution order: embedded shop, flat name, lookup, fallback
    """
    order = make_order_history(status="ready", totalAmount=120)
    assert order.status_display_name == "Ready for pickup"
    assert order.status_color == "green"
    assert order.formatted_total == "120.00 ₴"

    assert order.display_coffee_shop_name(lambda _id: "From cache") == "From cache"
    assert order.display_coffee_shop_name() == "Unknown coffee shop"
    named = make_order_history(coffeeShopName="Flat name")
    assert named.display_coffee_shop_name(lambda _id: "From cache") == "Flat name"
    embedded = make_order_history(coffeeShopName="Flat name", coffeeShop={"id": "shop-1", "name": "Embedded"})
    assert embedded.display_coffee_shop_name() == "Embedded"


def test_order_history_formatted_dates_and_lines():
    """
    Test date and line price formatting of OrderHistory.

    Verifies:
    - Created date and status history dates are formatted
    - Line price prefers finalPrice and the line total multiplies by quantity
    """
    order = make_order_history(
        created_at=datetime(2025, 5, 3, 14, 5, tzinfo=timezone.utc),
        statusHistory=[{"id": "h1", "status": "created", "createdAt": "2025-05-03T14:05:00Z"}],
        items=[{"id": "l1", "name": "Latte", "price": 70, "finalPrice": 85, "quantity": 2}],
    )
    assert order.formatted_created_date == "3 May 2025, 14:05"
    assert order.status_history[0].formatted_date == "3 May 14:05"
    assert order.items[0].formatted_price == "85.00 ₴"
    assert order.items[0].formatted_total == "170.00 ₴"


def test_cancellation_comment_ignores_standard_messages():
    """
    Test OrderHistory.cancellation_comment.

    Verifies:
    - The backend's default cancellation texts are not shown as comments
    - A custom reason is shown
    - Falls back to the last cancelled history entry
    - Non-cancelled orders have no comment
    """
    standard = make_order_history(
        status="cancelled",
        cancellationActor="customer",
        cancellationReason="Замовлення скасовано користувачем",
    )
    assert standard.cancellation_comment is None
    assert standard.cancellation_display_text == "Order cancelled by the customer"

    custom = make_order_history(status="cancelled", cancellationReason="Out of oat milk")
    assert custom.cancellation_comment == "Out of oat milk"

    from_history = make_order_history(
        status="cancelled",
        statusHistory=[
            {"id": "h1", "status": "created"},
            {"id": "h2", "status": "cancelled", "comment": "Machine is broken"},
        ],
    )
    assert from_history.cancellation_comment == "Machine is broken"

    assert make_order_history(status="completed", cancellationReason="x").cancellation_comment is None


def test_history_item_customization_display():
    """
    Test OrderHistoryItem.display_customization.

    Verifies:
    - Detailed breakdown is preferred and formats extras
    - Summary fallback drops the size section
    """
    order = make_order_history(
        items=[
            {
                "id": "l1",
                "name": "Latte",
                "price": 90,
                "customizationDetails": {
                    "size": {"name": "Large", "additionalPrice": 20},
                    "ingredients": [
                        {"name": "Espresso", "amount": 2, "unit": "shot", "pricing": {"totalPrice": 15}}
                    ],
                    "options": [
                        {
                            "optionGroupName": "Syrup",
                            "choices": [{"name": "Vanilla", "quantity": 2, "pricing": {"totalPrice": 15}}],
                        }
                    ],
                },
            },
            {
                "id": "l2",
                "name": "Cappuccino",
                "price": 60,
                "customizationSummary": "Size: Medium | Milk: Oat milk",
            },
        ]
    )
    detailed, summary = order.items
    assert detailed.display_customization == (
        "Ingredients: Espresso 2shot (+15.00 ₴)\nOptions: Syrup: Vanilla x2 (+15.00 ₴)"
    )
    assert detailed.effective_size_additional_price == Decimal("20")
    assert summary.display_customization == "Milk: Oat milk"


def test_payment_info_labels():
    """
    Test OrderPaymentInfo display helpers.

    Verifies:
    - Status enum, label, color and formatted amount
    """
    order = make_order_history(payment={"id": "p1", "status": "completed", "amount": "120"})
    assert order.payment.status is PaymentStatus.COMPLETED
    assert order.payment.status_display_name == "Paid"
    assert order.payment.status_color == "green"
    assert order.payment.formatted_amount == "120.00 ₴"


# =============================================================================
# USERS, SHOPS AND MENU
# =============================================================================


def test_user_full_name_and_roles():
    """
    Test User helpers.

    Verifies:
    - full_name falls back to first name, last name, then email
    - has_role accepts names
    - Roles compare by id
    """
    user = User(id="u1", email="olha@example.com", first_name="Olha", last_name="Kobylianska")
    assert user.full_name == "Olha Kobylianska"
    assert User(id="u1", email="a@b.c", last_name="Franko").full_name == "Franko"
    assert User(id="u1", email="a@b.c").full_name == "a@b.c"

    admin = User(id="u2", email="a@b.c", roles=[Role(id="r1", name="superadmin")])
    assert admin.has_role("superadmin")
    assert not admin.has_role("coffee_shop_owner")
    assert Role(id="r1", name="superadmin") == Role(id="r1", name="renamed")


def test_profile_update_sends_blank_fields_as_null():
    """
    Test ProfileUpdate.from_form().

    Verifies:
    - Whitespace-only fields become None
    - Values are stripped
    """
    update = ProfileUpdate.from_form(first_name="  Lesia ", last_name="   ", phone="")
    assert update.to_payload(exclude_none=False) == {"firstName": "Lesia", "lastName": None, "phone": None}


def test_coffee_shop_coordinate_from_metadata():
    """
    Test CoffeeShop.coordinate.

    Verifies:
    - Numeric latitude/longitude give a tuple
    - Missing or non-numeric values give None
    """
    shop = CoffeeShop(id="s1", name="Kavarnia", metadata={"latitude": "50.45", "longitude": 30.52})
    assert shop.coordinate == (50.45, 30.52)
    assert CoffeeShop(id="s1", name="Kavarnia").coordinate is None
    assert CoffeeShop(id="s1", name="K", metadata={"latitude": "north"}).coordinate is None


def test_menu_item_helpers():
    """
    Test MenuItem derived properties.

    Verifies:
    - Default size is the flagged one
    - Customizable ingredients are filtered
    - Plain items are not customizable
    """
    item = make_menu_item()
    assert item.default_size.id == "size-m"
    assert [s.abbreviation for s in item.sorted_sizes] == ["S", "M", "L"]
    assert [i.key for i in item.customizable_ingredients] == ["ing-shot"]
    assert item.is_customizable
    assert not make_menu_item(with_customization=False).is_customizable


def test_menu_item_price_serializes_as_number():
    """
    Test that money is sent to the API as a JSON number.

    Verifies:
    - to_payload emits float prices and camelCase keys
    """
    item = MenuItem(id="i1", name="Espresso", price="45.50")
    payload = item.to_payload()
    assert payload["price"] == 45.5
    assert "isAvailable" in payload


def test_history_filter_statuses():
    """
    Test OrderHistoryFilter.statuses.

    Verifies:
    - "all" has no restriction
    - "pending" covers every active status
    """
    assert OrderHistoryFilter.ALL.statuses is None
    assert set(OrderHistoryFilter.PENDING.statuses) == {s for s in OrderStatus if s.is_active}
    assert OrderHistoryFilter.CANCELLED.statuses == [OrderStatus.CANCELLED]


# =============================================================================
# MENU ITEM FORM
# =============================================================================


def test_menu_item_form_price_parsing():
    """
    Test MenuItemForm.parse_price() and is_valid.

    Verifies:
    - A comma works as decimal separator
    - Negative and non-numeric prices are rejected
    """
    assert MenuItemForm(name="Flat white", price="72,5").parse_price() == Decimal("72.5")
    assert MenuItemForm(name="Flat white", price="72,5").is_valid
    assert MenuItemForm(name="Flat white", price="-1").parse_price() is None
    assert not MenuItemForm(name="   ", price="10").is_valid
    assert MenuItemForm(name="Flat white", price="NaN").to_create_request() is None


def test_menu_item_form_editing():
    """
    Test the MenuItemForm list editors.

    Verifies:
    - Ingredients, options and choices can be added, replaced and removed
    - Out-of-range indexes are ignored
    - A new default size clears the previous default
    - The create request carries the group id
    """
    form = MenuItemForm(name="Raf", price="80", is_customizable=True)
    shot = form.add_ingredient("Espresso", 1, "shot", is_customizable=True, max_amount=2)
    form.update_ingredient(0, shot.model_copy(update={"amount": 2}))
    form.update_ingredient(5, shot)
    assert [i.amount for i in form.ingredients] == [2]

    form.add_option("Syrup", allow_multiple_choices=True)
    form.add_choice(0, "Lavender", Decimal("12"))
    form.add_choice(0, "Coconut")
    assert form.add_choice(3, "Nowhere") is None
    form.remove_choice(0, 1)
    assert [c.name for c in form.customization_options[0].choices] == ["Lavender"]

    form.add_size("Regular", "R")
    form.add_size("Big", "B", Decimal("15"), is_default=True)
    assert [s.is_default for s in form.sizes] == [False, True]
    form.remove_size(0)
    form.remove_size(9)
    assert [s.abbreviation for s in form.sizes] == ["B"]

    request = form.to_create_request("group-coffee")
    assert request.menu_group_id == "group-coffee"
    assert request.to_payload()["menuGroupId"] == "group-coffee"
    assert request.ingredients[0].name == "Espresso"
    assert request.customization_options[0].choices[0].price == Decimal("12")

    form.remove_ingredient(0)
    form.remove_option(0)
    assert form.ingredients == [] and form.customization_options == []


def test_menu_item_form_update_clears_turned_off_lists():
    """
    Test MenuItemForm.to_update_payload().

    Verifies:
    - Customization lists are sent empty when customization is off
    - Sizes are sent empty when the item has a single size
    - The group id is not part of the update
    """
    form = MenuItemForm.from_menu_item(make_menu_item())
    assert form.is_customizable
    assert form.has_multiple_sizes
    form.is_customizable = False
    form.has_multiple_sizes = False
    payload = form.to_update_payload()
    assert payload["ingredients"] == []
    assert payload["customizationOptions"] == []
    assert payload["sizes"] == []
    assert payload["price"] == 60.0
    assert "menuGroupId" not in payload

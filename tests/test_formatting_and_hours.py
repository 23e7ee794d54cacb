"""
Tests for display formatting and coffee shop working hours.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from domain import formatting
from domain.enums import OrderStatus, PaymentStatus
from domain.schemas.coffee_shop_schemas import WorkingHoursPeriod
from domain.working_hours import (
    CLOSED_TODAY,
    NO_INFORMATION,
    WorkingHours,
    day_key,
    default_working_hours,
    hours_for_day,
    is_open_based_on_hours,
    period_is_valid,
)
from test_fixtures import make_coffee_shop

# 2025-05-04 is a Sunday, 2025-05-05 a Monday.
SUNDAY_NOON = datetime(2025, 5, 4, 12, 0)
MONDAY_MORNING = datetime(2025, 5, 5, 7, 30)
MONDAY_EVENING = datetime(2025, 5, 5, 19, 45)


# =============================================================================
# MONEY AND DATES
# =============================================================================


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("45"), "45 ₴"),
        (Decimal("45.50"), "45.5 ₴"),
        (Decimal("45.555"), "45.56 ₴"),
        (0, "0 ₴"),
        (12.3, "12.3 ₴"),
    ],
)
def test_format_currency(amount, expected):
    """
    Test format_currency() trims trailing zeros.

    Verifies:
    - Whole amounts have no decimals
    - At most two decimals, rounded half up
    """
    assert formatting.format_currency(amount) == expected


def test_format_amount_always_two_decimals():
    """
    Test format_amount().

    Verifies:
    - Two decimals are always shown
    """
    assert formatting.format_amount(Decimal("45")) == "45.00 ₴"
    assert formatting.format_amount(Decimal("7.5")) == "7.50 ₴"


def test_format_dates():
    """
    Test order date formatting.

    Verifies:
    - Long form "3 May 2025, 14:05"
    - Short form "3 May 14:05"
    - None gives an empty string
    - API date strings are parsed, unparseable strings come back unchanged
    """
    moment = datetime(2025, 5, 3, 14, 5)
    assert formatting.format_order_date(moment) == "3 May 2025, 14:05"
    assert formatting.format_short_date(moment) == "3 May 14:05"
    assert formatting.format_order_date(None) == ""
    assert formatting.format_order_date("2025-05-03T14:05:00.000Z") == "3 May 2025, 14:05"
    assert formatting.format_short_date("2025-05-03T14:05:00Z") == "3 May 14:05"
    assert formatting.format_order_date("yesterday") == "yesterday"
    assert formatting.format_short_date("soon") == "soon"


def test_status_labels_cover_every_status():
    """
    Test status label and color maps.

    Verifies:
    - Every order and payment status has a label and a color
    """
    for status in OrderStatus:
        assert formatting.order_status_label(status)
        assert formatting.order_status_color(status)
    for status in PaymentStatus:
        assert formatting.payment_status_label(status)
        assert formatting.payment_status_color(status)
    assert formatting.order_status_color(OrderStatus.CANCELLED) == "red"
    assert formatting.payment_status_color(PaymentStatus.PROCESSING) == "primary"


def test_cancellation_text_by_actor():
    """
    Test cancellation_text().

    Verifies:
    - Known actors have their own text
    - Unknown actors get the generic text
    - No actor gives None
    """
    assert formatting.cancellation_text("coffee_shop") == "Order cancelled by the coffee shop"
    assert formatting.cancellation_text("admin") == "Order cancelled by an administrator"
    assert formatting.cancellation_text("system") == "Order cancelled"
    assert formatting.cancellation_text(None) is None


# =============================================================================
# WORKING HOURS
# =============================================================================


def test_day_key_sunday_is_zero():
    """
    Test day_key().

    Verifies:
    - Sunday maps to "0" and Monday to "1"
    """
    assert day_key(SUNDAY_NOON) == "0"
    assert day_key(MONDAY_MORNING) == "1"


def test_default_schedule_closes_sunday():
    """
    Test default_working_hours().

    Verifies:
    - Seven days, 09:00-21:00, Sunday closed
    """
    hours = default_working_hours()
    assert len(hours) == 7
    assert hours["0"].is_closed
    assert hours["3"].open == "09:00" and hours["3"].close == "21:00"


def test_for_shop_falls_back_to_defaults():
    """
    Test WorkingHours.for_shop() on a shop without hours.

    Verifies:
    - Default schedule is used
    - Shop hours are used when present
    """
    schedule = WorkingHours.for_shop(make_coffee_shop(working_hours={}))
    assert not schedule.is_open_at(SUNDAY_NOON)
    assert not schedule.is_open_at(MONDAY_MORNING)
    assert schedule.is_open_at(MONDAY_EVENING)

    assert WorkingHours.for_shop(make_coffee_shop()).is_open_at(SUNDAY_NOON)


def test_is_open_at_respects_hours_and_closed_days():
    """
    Test WorkingHours.is_open_at().

    Verifies:
    - Closed before opening time
    - Open within the period
    - Closed on a closed day
    """
    schedule = WorkingHours(default_working_hours())
    assert not schedule.is_open_at(MONDAY_MORNING)
    assert schedule.is_open_at(MONDAY_EVENING)
    assert not schedule.is_open_at(SUNDAY_NOON)

    shop = make_coffee_shop()
    assert is_open_based_on_hours(shop, MONDAY_EVENING)
    assert not is_open_based_on_hours(shop, MONDAY_MORNING)


def test_validate_schedule_messages():
    """
    Test WorkingHours.validate().

    Verifies:
    - A week with every day closed is rejected
    - Opening after closing is reported with the day name
    - Malformed times are reported
    - A correct week passes
    """
    all_closed = {str(d): WorkingHoursPeriod(is_closed=True) for d in range(7)}
    assert WorkingHours(all_closed).validate() == (
        False,
        "The coffee shop must be open at least one day a week",
    )

    reversed_monday = default_working_hours()
    reversed_monday["1"] = WorkingHoursPeriod(open="18:00", close="09:00")
    assert WorkingHours(reversed_monday).validate() == (
        False,
        "Monday: opening time must be earlier than closing time.",
    )

    malformed = default_working_hours()
    malformed["2"] = WorkingHoursPeriod(open="9am", close="21:00")
    assert WorkingHours(malformed).validate() == (False, "Tuesday: invalid time format, use HH:MM.")

    assert WorkingHours(default_working_hours()).validate() == (True, None)


def test_period_validity_and_closed_week():
    """
    Test period_is_valid() and is_open_now().

    Verifies:
    - Closed periods are always valid
    - Reversed or unparsable times are invalid
    - A week closed every day is never open
    """
    assert period_is_valid(WorkingHoursPeriod(open="22:00", close="08:00", is_closed=True))
    assert period_is_valid(WorkingHoursPeriod(open="08:00", close="22:00"))
    assert not period_is_valid(WorkingHoursPeriod(open="22:00", close="08:00"))
    assert not period_is_valid(WorkingHoursPeriod(open="noon", close="22:00"))

    all_closed = {str(d): WorkingHoursPeriod(is_closed=True) for d in range(7)}
    assert not WorkingHours(all_closed).is_open_now()


def test_to_api_model_uses_camel_case():
    """
    Test WorkingHours.to_api_model().

    Verifies:
    - Each day is sent with open, close and isClosed
    """
    payload = WorkingHours(default_working_hours()).to_api_model()
    assert payload["0"] == {"open": "09:00", "close": "21:00", "isClosed": True}


def test_hours_for_day_texts():
    """
    Test hours_for_day().

    Verifies:
    - Open day shows the range
    - Closed day and missing data have markers
    """
    shop = make_coffee_shop(working_hours=default_working_hours())
    assert hours_for_day(shop, MONDAY_MORNING) == "09:00 - 21:00"
    assert hours_for_day(shop, SUNDAY_NOON) == CLOSED_TODAY
    assert hours_for_day(make_coffee_shop(working_hours={}), SUNDAY_NOON) == NO_INFORMATION

"""
Working hours of a coffee shop.

Days are keyed "0".."6" with "0" meaning Sunday, matching the API payload.
"""

import re
from datetime import datetime, time
from typing import Dict, Optional, Tuple

from domain.schemas.coffee_shop_schemas import CoffeeShop, WorkingHoursPeriod

WEEK_DAYS = {
    "0": "Sunday",
    "1": "Monday",
    "2": "Tuesday",
    "3": "Wednesday",
    "4": "Thursday",
    "5": "Friday",
    "6": "Saturday",
}

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

NO_INFORMATION = "No information"
CLOSED_TODAY = "Closed today"


def day_key(moment: datetime) -> str:
    """Weekday key of a moment, Sunday being "0"."""
    return str((moment.weekday() + 1) % 7)


def day_name(day: int | str) -> str:
    return WEEK_DAYS.get(str(day), f"Day {day}")


def parse_time(value: str) -> Optional[time]:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        return None


def default_working_hours() -> Dict[str, WorkingHoursPeriod]:
    """09:00-21:00 every day, Sunday closed"""
    return {
        str(day): WorkingHoursPeriod(open="09:00", close="21:00", is_closed=day == 0)
        for day in range(7)
    }


def period_is_valid(period: WorkingHoursPeriod) -> bool:
    if period.is_closed:
        return True
    open_time = parse_time(period.open)
    close_time = parse_time(period.close)
    if open_time is None or close_time is None:
        return False
    return open_time < close_time


class WorkingHours:
    """Week schedule with open/closed checks and validation"""

    def __init__(self, hours: Optional[Dict[str, WorkingHoursPeriod]] = None):
        self.hours: Dict[str, WorkingHoursPeriod] = dict(hours) if hours else default_working_hours()

    @classmethod
    def for_shop(cls, shop: CoffeeShop) -> "WorkingHours":
        return cls(shop.working_hours)

    def is_open_at(self, moment: datetime) -> bool:
        period = self.hours.get(day_key(moment))
        if period is None or period.is_closed:
            return False
        open_time = parse_time(period.open)
        close_time = parse_time(period.close)
        if open_time is None or close_time is None:
            return False
        now = moment.time().replace(second=0, microsecond=0, tzinfo=None)
        return open_time <= now <= close_time

    def is_open_now(self) -> bool:
        return self.is_open_at(datetime.now())

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Check the schedule; returns (ok, error message)"""
        if not any(not period.is_closed for period in self.hours.values()):
            return False, "The coffee shop must be open at least one day a week"

        for day in sorted(self.hours):
            period = self.hours[day]
            if period.is_closed:
                continue
            open_time = parse_time(period.open)
            close_time = parse_time(period.close)
            if open_time is not None and close_time is not None and open_time >= close_time:
                return False, f"{day_name(day)}: opening time must be earlier than closing time."
            if not TIME_PATTERN.match(period.open) or not TIME_PATTERN.match(period.close):
                return False, f"{day_name(day)}: invalid time format, use HH:MM."
        return True, None

    def to_api_model(self) -> Dict[str, dict]:
        return {
            day: {"open": p.open, "close": p.close, "isClosed": p.is_closed}
            for day, p in self.hours.items()
        }


def is_open_based_on_hours(shop: CoffeeShop, moment: Optional[datetime] = None) -> bool:
    return WorkingHours.for_shop(shop).is_open_at(moment or datetime.now())


def hours_for_day(shop: CoffeeShop, moment: Optional[datetime] = None) -> str:
    """Today's hours as "HH:MM - HH:MM", or a closed / unknown marker"""
    if not shop.working_hours:
        return NO_INFORMATION
    period = shop.working_hours.get(day_key(moment or datetime.now()))
    if period is None:
        return NO_INFORMATION
    if period.is_closed:
        return CLOSED_TODAY
    return f"{period.open} - {period.close}"

from typing import Optional, Dict, Any, Tuple

from pydantic import Field

from domain.schemas.base import APIModel, ApiDateTime, utcnow


class WorkingHoursPeriod(APIModel):
    """Opening hours of one weekday, times as HH:MM"""

    open: str = "09:00"
    close: str = "21:00"
    is_closed: bool = False


class CoffeeShop(APIModel):
    """Coffee shop as returned by /coffee-shops endpoints"""

    id: str
    name: str
    address: Optional[str] = None
    logo_url: Optional[str] = None
    owner_id: Optional[str] = None
    allow_scheduled_orders: bool = False
    min_preorder_time_minutes: int = 15
    max_preorder_time_minutes: int = 1440
    # Keys "0".."6", 0 is Sunday
    working_hours: Optional[Dict[str, WorkingHoursPeriod]] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)
    distance: Optional[float] = None
    is_open: bool = True

    @property
    def coordinate(self) -> Optional[Tuple[float, float]]:
        """(latitude, longitude) taken from metadata, when both are numeric"""
        if not self.metadata:
            return None
        lat = self.metadata.get("latitude")
        lng = self.metadata.get("longitude")
        try:
            return float(lat), float(lng)
        except (TypeError, ValueError):
            return None


class CoffeeShopInfo(APIModel):
    """Short shop reference embedded in orders"""

    id: str
    name: str
    address: Optional[str] = None


class CoffeeShopCreate(APIModel):
    name: str
    address: Optional[str] = None


class OwnerAssignment(APIModel):
    owner_id: str

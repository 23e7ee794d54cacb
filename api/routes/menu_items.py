"""Menu item routes"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import get_current_user, get_store, require_manager
from api.responses import dump, dump_all
from api.schemas import AvailabilityResult, MenuItemUpdate
from api.store import SandboxStore
from domain.schemas.menu_schemas import MenuItemCreate
from domain.schemas.user_schemas import User

router = APIRouter(prefix="/menu-groups", tags=["Menu items"])
logger = logging.getLogger("nidus.sandbox.menu_items")


@router.get("/{group_id}/items")
def list_items(group_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    return dump_all(store.items_of(group_id))


@router.get("/{group_id}/items/filter")
def filter_items(
    group_id: str,
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    store: SandboxStore = Depends(get_store),
    _: User = Depends(get_current_user),
):
    items = [
        i for i in store.items_of(group_id)
        if (min_price is None or i.price >= min_price) and (max_price is None or i.price <= max_price)
    ]
    return dump_all(items)


@router.get("/{group_id}/items/{item_id}")
def get_item(group_id: str, item_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    return dump(store.get_item(group_id, item_id))


@router.post("/{group_id}/items", status_code=status.HTTP_201_CREATED)
def create_item(
    group_id: str,
    body: MenuItemCreate,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    return dump(store.create_item(user, group_id, body.model_dump()))


@router.patch("/{group_id}/items/{item_id}")
def update_item(
    group_id: str,
    item_id: str,
    body: MenuItemUpdate,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    return dump(store.update_item(user, group_id, item_id, body.model_dump(exclude_unset=True)))


@router.delete("/{group_id}/items/{item_id}")
def delete_item(
    group_id: str,
    item_id: str,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    store.delete_item(user, group_id, item_id)
    return {"message": "Menu item deleted"}


@router.patch("/{group_id}/items/{item_id}/availability")
def update_availability(
    group_id: str,
    item_id: str,
    available: bool = Query(...),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    item = store.update_item(user, group_id, item_id, {"is_available": available})
    logger.info("Menu item %s availability set to %s", item.id, available)
    return AvailabilityResult(is_available=item.is_available).to_payload()

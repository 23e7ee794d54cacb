"""Coffee shop, menu and menu group routes"""

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import get_current_user, get_store, require_manager, require_superadmin
from api.responses import dump, dump_all
from api.schemas import CoffeeShopUpdate
from api.store import SandboxStore
from app.exceptions import NotFoundError
from domain.schemas.coffee_shop_schemas import CoffeeShopCreate, OwnerAssignment
from domain.schemas.menu_schemas import MenuGroup, MenuGroupCreate, MenuGroupUpdate
from domain.schemas.user_schemas import User

router = APIRouter(prefix="/coffee-shops", tags=["Coffee shops"])
logger = logging.getLogger("nidus.sandbox.coffee_shops")


def _group_of_shop(store: SandboxStore, coffee_shop_id: str, group_id: str) -> MenuGroup:
    store.get_shop(coffee_shop_id)
    group = store.get_group(group_id)
    if group.coffee_shop_id != coffee_shop_id:
        raise NotFoundError(f"Menu group {group_id} not found")
    return group


@router.get("/find-all")
def find_all(store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    return dump_all(store.render_shop(s) for s in store.coffee_shops.values())


@router.get("/my-shops")
def my_shops(store: SandboxStore = Depends(get_store), user: User = Depends(require_manager)):
    return dump_all(
        store.render_shop(s) for s in store.coffee_shops.values() if s.owner_id == user.id
    )


@router.get("/search")
def search(
    address: str = Query(""),
    store: SandboxStore = Depends(get_store),
    _: User = Depends(get_current_user),
):
    return dump_all(store.render_shop(s) for s in store.search_shops(address))


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create(body: CoffeeShopCreate, store: SandboxStore = Depends(get_store), user: User = Depends(require_manager)):
    return dump(store.render_shop(store.create_shop(user, body.name, body.address)))


@router.get("/{coffee_shop_id}")
def get_one(coffee_shop_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    return dump(store.render_shop(store.get_shop(coffee_shop_id)))


@router.patch("/{coffee_shop_id}")
def update(
    coffee_shop_id: str,
    body: CoffeeShopUpdate,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    shop = store.update_shop(user, coffee_shop_id, body.model_dump(exclude_unset=True))
    return dump(store.render_shop(shop))


@router.delete("/{coffee_shop_id}")
def delete(coffee_shop_id: str, store: SandboxStore = Depends(get_store), user: User = Depends(require_manager)):
    store.delete_shop(user, coffee_shop_id)
    logger.info("Coffee shop %s deleted by %s", coffee_shop_id, user.id)
    return {"message": "Coffee shop deleted"}


@router.patch("/{coffee_shop_id}/owner")
def assign_owner(
    coffee_shop_id: str,
    body: OwnerAssignment,
    store: SandboxStore = Depends(get_store),
    _: User = Depends(require_superadmin),
):
    return dump(store.render_shop(store.assign_owner(coffee_shop_id, body.owner_id)))


@router.get("/{coffee_shop_id}/menu")
def menu(coffee_shop_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    """Menu groups with their items embedded"""
    return dump_all(store.group_with_items(g) for g in store.groups_of(coffee_shop_id))


# ============================================================================
# Menu groups
# ============================================================================


@router.get("/{coffee_shop_id}/menu-groups")
def list_groups(coffee_shop_id: str, store: SandboxStore = Depends(get_store), _: User = Depends(get_current_user)):
    return dump_all(store.groups_of(coffee_shop_id))


@router.get("/{coffee_shop_id}/menu-groups/{group_id}")
def get_group(
    coffee_shop_id: str,
    group_id: str,
    store: SandboxStore = Depends(get_store),
    _: User = Depends(get_current_user),
):
    return dump(store.group_with_items(_group_of_shop(store, coffee_shop_id, group_id)))


@router.post("/{coffee_shop_id}/menu-groups", status_code=status.HTTP_201_CREATED)
def create_group(
    coffee_shop_id: str,
    body: MenuGroupCreate,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    group = store.create_group(user, coffee_shop_id, body.name, body.description, body.display_order)
    return dump(group)


@router.patch("/{coffee_shop_id}/menu-groups/{group_id}")
def update_group(
    coffee_shop_id: str,
    group_id: str,
    body: MenuGroupUpdate,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    _group_of_shop(store, coffee_shop_id, group_id)
    return dump(store.update_group(user, group_id, body.model_dump(exclude_unset=True)))


@router.delete("/{coffee_shop_id}/menu-groups/{group_id}")
def delete_group(
    coffee_shop_id: str,
    group_id: str,
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    _group_of_shop(store, coffee_shop_id, group_id)
    store.delete_group(user, group_id)
    return {"message": "Menu group deleted"}


@router.put("/{coffee_shop_id}/menu-groups/{group_id}/display-order")
def update_display_order(
    coffee_shop_id: str,
    group_id: str,
    order: int = Query(..., ge=0),
    store: SandboxStore = Depends(get_store),
    user: User = Depends(require_manager),
):
    _group_of_shop(store, coffee_shop_id, group_id)
    return dump(store.update_group(user, group_id, {"display_order": order}))

"""
Shared test fixtures and factories for the Nidus test suite.

Client-side tests run against the sandbox backend through FastAPI's TestClient,
which is an httpx.Client and can be handed to the HTTP adapter directly. Each
test gets a freshly seeded store, so tests never see each other's orders.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from adapters.http_adapter import HTTPAdapter, MemoryTokenStore
from api.store import SandboxStore
from domain.cart import CartItem
from domain.models import create_local_engine, init_database
from domain.schemas.coffee_shop_schemas import CoffeeShop, WorkingHoursPeriod
from domain.schemas.menu_schemas import (
    CustomizationChoice,
    CustomizationOption,
    Ingredient,
    MenuItem,
    Size,
)
from domain.schemas.order_history_schemas import OrderHistory
from domain.schemas.user_schemas import Role, User
from main import create_app

SANDBOX_BASE_URL = "http://testserver/api"

# Seeded sandbox accounts
CUSTOMER_ID = "user-customer"
OWNER_ID = "user-owner"
ADMIN_ID = "user-admin"
CUSTOMER_EMAIL = "customer@nidus.test"
CUSTOMER_PASSWORD = "customer123"
OWNER_EMAIL = "owner@nidus.test"
OWNER_PASSWORD = "owner123"

# Seeded coffee shops and menu
PODIL_SHOP_ID = "shop-podil"
LVIV_SHOP_ID = "shop-lviv"
COFFEE_GROUP_ID = "group-coffee"
TEA_GROUP_ID = "group-tea"


def unique_email(prefix: str = "guest") -> str:
    """Generate a unique email address so registrations never collide"""
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


def make_user(user_id="user-1", email=None, first_name="Mykola", last_name="Shevchenko", roles=None):
    """
    Create a User with realistic data.

    Args:
        user_id: id of the user
        email: email address; generated when omitted
        first_name: first name
        last_name: last name
        roles: list of role names such as "superadmin" or "coffee_shop_owner"

    Returns:
        User: profile as the API would return it

    Example:
        >>> owner = make_user(roles=["coffee_shop_owner"])
        >>> owner.has_role("coffee_shop_owner")
        True
    """
    return User(
        id=user_id,
        email=email or unique_email("mykola"),
        first_name=first_name,
        last_name=last_name,
        roles=[Role(id=f"role-{name}", name=name) for name in roles or []],
    )


def make_coffee_shop(shop_id="shop-1", name="Kavarnia na Podoli", owner_id=None, working_hours=None, **extra):
    """
    Create a CoffeeShop open 08:00-20:00 every day unless hours are given.

    Example:
        >>> shop = make_coffee_shop(owner_id="user-1")
        >>> shop.working_hours["0"].open
        '08:00'
    """
    if working_hours is None:
        working_hours = {
            str(day): WorkingHoursPeriod(open="08:00", close="20:00") for day in range(7)
        }
    return CoffeeShop(
        id=shop_id,
        name=name,
        address="Kyiv, Kontraktova Sq, 2",
        owner_id=owner_id,
        working_hours=working_hours,
        **extra,
    )


def make_menu_item(item_id="latte-1", price="60", with_customization=True):
    """
    Create a latte-like MenuItem.

    With customization it carries three sizes (S +0, M +10 default, L +20),
    a customizable espresso ingredient (one free shot, 15 per extra shot,
    1-3 shots), a required milk option and a multi-choice syrup option whose
    vanilla choice allows quantities (default 1, max 3, +5 per extra unit).

    Example:
        >>> item = make_menu_item()
        >>> item.default_size.abbreviation
        'M'
    """
    if not with_customization:
        return MenuItem(id=item_id, name="Americano", price=Decimal(price))
    return MenuItem(
        id=item_id,
        name="Latte",
        price=Decimal(price),
        has_multiple_sizes=True,
        sizes=[
            Size(id="size-s", name="Small", abbreviation="S", order=0),
            Size(id="size-m", name="Medium", abbreviation="M", additional_price=Decimal("10"), is_default=True, order=1),
            Size(id="size-l", name="Large", abbreviation="L", additional_price=Decimal("20"), order=2),
        ],
        ingredients=[
            Ingredient(
                id="ing-shot",
                name="Espresso",
                amount=1,
                unit="shot",
                is_customizable=True,
                min_amount=1,
                max_amount=3,
                free_amount=1,
                price_per_unit=Decimal("15"),
            ),
            Ingredient(id="ing-milk", name="Milk", amount=200, unit="ml"),
        ],
        customization_options=[
            CustomizationOption(
                id="milk",
                name="Milk",
                required=True,
                choices=[
                    CustomizationChoice(id="cow", name="Cow milk"),
                    CustomizationChoice(id="oat", name="Oat milk", price=Decimal("15")),
                ],
            ),
            CustomizationOption(
                id="syrup",
                name="Syrup",
                allow_multiple_choices=True,
                choices=[
                    CustomizationChoice(
                        id="vanilla",
                        name="Vanilla",
                        price=Decimal("10"),
                        allow_quantity=True,
                        default_quantity=1,
                        max_quantity=3,
                        price_per_additional_unit=Decimal("5"),
                    ),
                    CustomizationChoice(id="caramel", name="Caramel", price=Decimal("10")),
                ],
            ),
        ],
    )


def make_cart_item(menu_item_id="espresso-1", coffee_shop_id="shop-1", price="45", quantity=1, **extra):
    """
    Create a CartItem without customization.

    Example:
        >>> make_cart_item(quantity=2).total_price
        Decimal('90')
    """
    return CartItem(
        menu_item_id=menu_item_id,
        coffee_shop_id=coffee_shop_id,
        name=extra.pop("name", "Espresso"),
        price=Decimal(price),
        quantity=quantity,
        **extra,
    )


def make_order_history(order_id="order-1", status="completed", created_at=None, **extra):
    """
    Create an OrderHistory from a camelCase payload, as the API would send it.

    Args:
        order_id: id of the order; the order number is derived from it
        status: order status value
        created_at: creation time; defaults to one hour ago
        **extra: additional camelCase fields merged into the payload

    Returns:
        OrderHistory: decoded order
    """
    created_at = created_at or datetime.now(timezone.utc) - timedelta(hours=1)
    payload = {
        "id": order_id,
        "orderNumber": f"N-{order_id[-4:]}",
        "status": status,
        "totalAmount": 120,
        "coffeeShopId": "shop-1",
        "createdAt": created_at.isoformat(),
        "items": [{"id": f"{order_id}-line", "name": "Cappuccino", "quantity": 2, "price": 60}],
    }
    payload.update(extra)
    return OrderHistory.model_validate(payload)


# =============================================================================
# DATABASE AND SANDBOX FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Local store session on an in-memory SQLite database.

    Tables are created fresh for every test and the engine is disposed after it.
    """
    engine = create_local_engine("sqlite://", echo=False)
    init_database(bind=engine)
    session = sessionmaker(bind=engine, future=True, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(scope="function")
def sandbox_store() -> SandboxStore:
    """Freshly seeded sandbox data"""
    return SandboxStore()


@pytest.fixture(scope="function")
def sandbox_client(sandbox_store) -> Generator[TestClient, None, None]:
    """TestClient for a sandbox app built around sandbox_store"""
    with TestClient(create_app(sandbox_store)) as client:
        yield client


def auth_headers(user_id: str) -> dict:
    """Bearer header accepted by the sandbox for a seeded user"""
    return {"Authorization": f"Bearer token-{user_id}"}


def make_api(client: TestClient, user_id: str = None) -> HTTPAdapter:
    """HTTP adapter talking to the sandbox; signed in as user_id when given"""
    tokens = MemoryTokenStore()
    if user_id is not None:
        tokens.save_tokens(f"token-{user_id}", f"refresh-{user_id}")
    return HTTPAdapter(base_url=SANDBOX_BASE_URL, token_store=tokens, client=client)


@pytest.fixture(scope="function")
def api(sandbox_client) -> HTTPAdapter:
    """Signed-out adapter"""
    return make_api(sandbox_client)


@pytest.fixture(scope="function")
def customer_api(sandbox_client) -> HTTPAdapter:
    return make_api(sandbox_client, CUSTOMER_ID)


@pytest.fixture(scope="function")
def owner_api(sandbox_client) -> HTTPAdapter:
    return make_api(sandbox_client, OWNER_ID)


@pytest.fixture(scope="function")
def admin_api(sandbox_client) -> HTTPAdapter:
    return make_api(sandbox_client, ADMIN_ID)

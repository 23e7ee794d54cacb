"""
In-memory backend state for the sandbox API.

Holds users, coffee shops, menus and orders, seeded with a small realistic
data set. Every rule the real backend enforces and the client depends on
(ownership, role checks, order transitions, payment) lives here so that the
routers stay thin.
"""

import logging
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from app.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceValidationError,
    UnauthorizedError,
)
from api.pricing import price_line
from api.schemas import (
    OrderItemRecord,
    OrderRecord,
    PaymentRecord,
    StatusRecord,
)
from domain import formatting
from domain.enums import CancellationActor, OrderStatus, PaymentStatus, RoleName
from domain.schemas.base import utcnow
from domain.schemas.coffee_shop_schemas import CoffeeShop, WorkingHoursPeriod
from domain.schemas.menu_schemas import (
    CustomizationChoice,
    CustomizationOption,
    Ingredient,
    MenuGroup,
    MenuItem,
    Size,
)
from domain.schemas.order_schemas import OrderCreate
from domain.schemas.user_schemas import Role, User
from domain.working_hours import is_open_based_on_hours

logger = logging.getLogger("nidus.sandbox.store")

ACCESS_PREFIX = "token-"
REFRESH_PREFIX = "refresh-"
PAYMENT_URL = "https://pay.sandbox.nidus.test/checkout/{payment_id}"
PAYMENT_TTL = timedelta(minutes=30)

CUSTOMER_CANCELLABLE = (OrderStatus.CREATED, OrderStatus.PENDING)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class SandboxStore:
    """All sandbox data; one instance per app"""

    def __init__(self, seed: bool = True):
        self.roles: Dict[str, Role] = {}
        self.users: Dict[str, User] = {}
        self.passwords: Dict[str, str] = {}
        self.coffee_shops: Dict[str, CoffeeShop] = {}
        self.menu_groups: Dict[str, MenuGroup] = {}
        self.menu_items: Dict[str, MenuItem] = {}
        self.orders: Dict[str, OrderRecord] = {}
        self._order_counter = 0
        if seed:
            seed_store(self)

    # ------------------------------------------------------------------
    # Users and tokens
    # ------------------------------------------------------------------

    def add_user(self, email: str, password: str, role_names: Iterable[str] = (), user_id: Optional[str] = None, **profile) -> User:
        if self.find_user_by_email(email) is not None:
            raise ConflictError(f"User with email {email} already exists")
        user = User(
            id=user_id or new_id("user"),
            email=email,
            roles=[self.role(name) for name in role_names],
            **profile,
        )
        self.users[user.id] = user
        self.passwords[user.id] = password
        return user

    def role(self, name: str) -> Role:
        for role in self.roles.values():
            if role.name == name:
                return role
        raise ServiceValidationError(f"Unknown role {name}")

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        return next((u for u in self.users.values() if u.email.lower() == wanted), None)

    def get_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.find_user_by_email(email)
        if user is None or self.passwords.get(user.id) != password:
            raise UnauthorizedError("Invalid email or password")
        return user

    @staticmethod
    def access_token_for(user: User) -> str:
        return f"{ACCESS_PREFIX}{user.id}"

    @staticmethod
    def refresh_token_for(user: User) -> str:
        return f"{REFRESH_PREFIX}{user.id}"

    def user_for_token(self, token: str, prefix: str = ACCESS_PREFIX) -> User:
        if not token or not token.startswith(prefix):
            raise UnauthorizedError()
        user = self.users.get(token[len(prefix):])
        if user is None:
            raise UnauthorizedError()
        return user

    def update_profile(self, user_id: str, changes: dict) -> User:
        user = self.get_user(user_id)
        updated = user.model_copy(update=changes)
        self.users[user_id] = updated
        return updated

    def set_roles(self, user_id: str, role_names: List[str]) -> User:
        return self.update_profile(user_id, {"roles": [self.role(n) for n in role_names]})

    def delete_user(self, user_id: str) -> None:
        self.get_user(user_id)
        del self.users[user_id]
        self.passwords.pop(user_id, None)
        for shop in self.coffee_shops.values():
            if shop.owner_id == user_id:
                shop.owner_id = None

    # ------------------------------------------------------------------
    # Coffee shops
    # ------------------------------------------------------------------

    def render_shop(self, shop: CoffeeShop) -> CoffeeShop:
        return shop.model_copy(update={"is_open": is_open_based_on_hours(shop)})

    def get_shop(self, coffee_shop_id: str) -> CoffeeShop:
        shop = self.coffee_shops.get(coffee_shop_id)
        if shop is None:
            raise NotFoundError(f"Coffee shop {coffee_shop_id} not found")
        return shop

    def check_can_manage(self, user: User, shop: CoffeeShop) -> None:
        if user.has_role(RoleName.SUPERADMIN):
            return
        if user.has_role(RoleName.COFFEE_SHOP_OWNER) and shop.owner_id == user.id:
            return
        raise PermissionDeniedError("You can only manage your own coffee shops")

    def create_shop(self, user: User, name: str, address: Optional[str] = None) -> CoffeeShop:
        if not (user.has_role(RoleName.SUPERADMIN) or user.has_role(RoleName.COFFEE_SHOP_OWNER)):
            raise PermissionDeniedError()
        shop = CoffeeShop(
            id=new_id("shop"),
            name=name,
            address=address,
            owner_id=user.id if user.has_role(RoleName.COFFEE_SHOP_OWNER) else None,
        )
        self.coffee_shops[shop.id] = shop
        logger.info("Coffee shop %s created by %s", shop.id, user.id)
        return shop

    def update_shop(self, user: User, coffee_shop_id: str, changes: dict) -> CoffeeShop:
        shop = self.get_shop(coffee_shop_id)
        self.check_can_manage(user, shop)
        changes = {k: v for k, v in changes.items() if k not in ("id", "owner_id", "created_at")}
        updated = CoffeeShop.model_validate(
            {**shop.model_dump(), **changes, "updated_at": utcnow()}
        )
        self.coffee_shops[shop.id] = updated
        return updated

    def delete_shop(self, user: User, coffee_shop_id: str) -> None:
        shop = self.get_shop(coffee_shop_id)
        self.check_can_manage(user, shop)
        for group in [g for g in self.menu_groups.values() if g.coffee_shop_id == shop.id]:
            self._drop_group(group.id)
        del self.coffee_shops[shop.id]

    def assign_owner(self, coffee_shop_id: str, owner_id: str) -> CoffeeShop:
        shop = self.get_shop(coffee_shop_id)
        owner = self.get_user(owner_id)
        if not owner.has_role(RoleName.COFFEE_SHOP_OWNER):
            raise ServiceValidationError("User does not have the coffee shop owner role")
        shop.owner_id = owner.id
        shop.updated_at = utcnow()
        return shop

    def search_shops(self, address: str) -> List[CoffeeShop]:
        needle = address.strip().lower()
        return [s for s in self.coffee_shops.values() if needle in (s.address or "").lower()]

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def get_group(self, group_id: str) -> MenuGroup:
        group = self.menu_groups.get(group_id)
        if group is None:
            raise NotFoundError(f"Menu group {group_id} not found")
        return group

    def groups_of(self, coffee_shop_id: str) -> List[MenuGroup]:
        self.get_shop(coffee_shop_id)
        groups = [g for g in self.menu_groups.values() if g.coffee_shop_id == coffee_shop_id]
        return sorted(groups, key=lambda g: g.display_order)

    def items_of(self, group_id: str) -> List[MenuItem]:
        self.get_group(group_id)
        return [i for i in self.menu_items.values() if i.menu_group_id == group_id]

    def group_with_items(self, group: MenuGroup) -> MenuGroup:
        return group.model_copy(update={"menu_items": self.items_of(group.id)})

    def create_group(self, user: User, coffee_shop_id: str, name: str, description: Optional[str], display_order: int) -> MenuGroup:
        self.check_can_manage(user, self.get_shop(coffee_shop_id))
        group = MenuGroup(
            id=new_id("group"),
            name=name,
            description=description,
            display_order=display_order,
            coffee_shop_id=coffee_shop_id,
        )
        self.menu_groups[group.id] = group
        return group

    def update_group(self, user: User, group_id: str, changes: dict) -> MenuGroup:
        group = self.get_group(group_id)
        self.check_can_manage(user, self.get_shop(group.coffee_shop_id))
        for key, value in changes.items():
            if value is not None:
                setattr(group, key, value)
        group.updated_at = utcnow()
        return group

    def _drop_group(self, group_id: str) -> None:
        for item_id in [i.id for i in self.items_of(group_id)]:
            del self.menu_items[item_id]
        del self.menu_groups[group_id]

    def delete_group(self, user: User, group_id: str) -> None:
        group = self.get_group(group_id)
        self.check_can_manage(user, self.get_shop(group.coffee_shop_id))
        self._drop_group(group_id)

    def get_item(self, group_id: str, item_id: str) -> MenuItem:
        item = self.menu_items.get(item_id)
        if item is None or item.menu_group_id != group_id:
            raise NotFoundError(f"Menu item {item_id} not found")
        return item

    def find_item(self, item_id: str) -> MenuItem:
        item = self.menu_items.get(item_id)
        if item is None:
            raise NotFoundError(f"Menu item {item_id} not found")
        return item

    def shop_of_item(self, item: MenuItem) -> CoffeeShop:
        return self.get_shop(self.get_group(item.menu_group_id).coffee_shop_id)

    def create_item(self, user: User, group_id: str, data: dict) -> MenuItem:
        group = self.get_group(group_id)
        self.check_can_manage(user, self.get_shop(group.coffee_shop_id))
        item = MenuItem.model_validate({**data, "id": new_id("item"), "menu_group_id": group_id})
        self.menu_items[item.id] = item
        return item

    def update_item(self, user: User, group_id: str, item_id: str, changes: dict) -> MenuItem:
        item = self.get_item(group_id, item_id)
        self.check_can_manage(user, self.shop_of_item(item))
        changes = {k: v for k, v in changes.items() if k not in ("id", "menu_group_id", "created_at")}
        updated = MenuItem.model_validate({**item.model_dump(), **changes, "updated_at": utcnow()})
        self.menu_items[item.id] = updated
        return updated

    def delete_item(self, user: User, group_id: str, item_id: str) -> None:
        item = self.get_item(group_id, item_id)
        self.check_can_manage(user, self.shop_of_item(item))
        del self.menu_items[item.id]

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> OrderRecord:
        order = self.orders.get(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def get_order_for(self, user: User, order_id: str) -> OrderRecord:
        order = self.get_order(order_id)
        if order.user_id == user.id:
            return order
        self.check_can_manage(user, self.get_shop(order.coffee_shop_id))
        return order

    def _next_order_number(self) -> str:
        self._order_counter += 1
        return f"N-{self._order_counter:04d}"

    def create_order(self, user: User, request: OrderCreate) -> OrderRecord:
        shop = self.get_shop(request.coffee_shop_id)
        if not request.items:
            raise ServiceValidationError("Order must contain at least one item")
        if request.scheduled_for is not None and not shop.allow_scheduled_orders:
            raise ServiceValidationError("This coffee shop does not accept scheduled orders")

        order_id = new_id("order")
        records = []
        total = Decimal("0")
        for line in request.items:
            item = self.find_item(line.menu_item_id)
            if self.shop_of_item(item).id != shop.id:
                raise ServiceValidationError(f"{item.name} is not on the menu of {shop.name}")
            if not item.is_available:
                raise ServiceValidationError(f"{item.name} is not available")
            priced = price_line(item, line.customization)
            total += priced.unit_price * line.quantity
            records.append(
                OrderItemRecord(
                    id=new_id("order-item"),
                    order_id=order_id,
                    menu_item_id=item.id,
                    name=item.name,
                    quantity=line.quantity,
                    price=priced.unit_price,
                    base_price=item.price,
                    final_price=priced.unit_price,
                    size_name=priced.size.name if priced.size else None,
                    size_additional_price=priced.size.additional_price if priced.size else None,
                    customization=line.customization.to_payload() if line.customization else None,
                    customization_summary=priced.summary(),
                    customization_details=priced.details(),
                )
            )

        order = OrderRecord(
            id=order_id,
            order_number=self._next_order_number(),
            user_id=user.id,
            coffee_shop_id=shop.id,
            total_amount=total,
            items=records,
            comment=request.comment,
            scheduled_for=request.scheduled_for,
        )
        self._record_status(order, OrderStatus.CREATED, user.id)
        self.orders[order.id] = order
        logger.info("Order %s created for %s", order.order_number, user.id)
        return order

    def _record_status(self, order: OrderRecord, status: OrderStatus, user_id: Optional[str], comment: Optional[str] = None) -> None:
        moment = utcnow()
        order.status = status
        order.status_history.append(
            StatusRecord(
                id=new_id("status"),
                order_id=order.id,
                status=status,
                comment=comment,
                changed_by_user_id=user_id,
                created_by=user_id,
                created_at=moment,
            )
        )
        if status == OrderStatus.COMPLETED:
            order.completed_at = moment
        order.touch(moment)

    def start_payment(self, order: OrderRecord) -> PaymentRecord:
        if order.is_paid:
            raise ConflictError("Order is already paid")
        if order.status == OrderStatus.CANCELLED:
            raise ServiceValidationError("Order is cancelled")
        payment_id = new_id("payment")
        order.payment = PaymentRecord(
            id=payment_id,
            amount=order.total_amount,
            payment_url=PAYMENT_URL.format(payment_id=payment_id),
            expires_at=utcnow() + PAYMENT_TTL,
        )
        order.touch()
        return order.payment

    def complete_payment(self, order_id: str) -> OrderRecord:
        """Payment provider callback: marks the order paid and sends it to the shop"""
        order = self.get_order(order_id)
        if order.payment is None:
            raise ServiceValidationError("Order has no payment in progress")
        order.payment.status = PaymentStatus.COMPLETED
        order.payment.completed_at = utcnow()
        order.payment.transaction_id = new_id("txn")
        order.is_paid = True
        if order.status == OrderStatus.CREATED:
            self._record_status(order, OrderStatus.PENDING, None)
        return order

    def fail_payment(self, order_id: str) -> OrderRecord:
        order = self.get_order(order_id)
        if order.payment is None:
            raise ServiceValidationError("Order has no payment in progress")
        order.payment.status = PaymentStatus.FAILED
        order.touch()
        return order

    def cancel_order(self, user: User, order_id: str, reason: Optional[str] = None) -> OrderRecord:
        order = self.get_order_for(user, order_id)
        if order.status not in CUSTOMER_CANCELLABLE:
            raise ServiceValidationError("Order can no longer be cancelled")
        self._cancel(order, user, CancellationActor.CUSTOMER, reason)
        return order

    def _cancel(self, order: OrderRecord, user: User, actor: CancellationActor, reason: Optional[str]) -> None:
        order.cancelled_by = user.id
        order.cancellation_actor = actor.value
        order.cancellation_reason = reason
        if order.payment is not None and order.payment.status == PaymentStatus.PENDING:
            order.payment.status = PaymentStatus.CANCELLED
        self._record_status(order, OrderStatus.CANCELLED, user.id, reason or formatting.cancellation_text(actor.value))

    def change_status(self, user: User, order_id: str, status: OrderStatus, comment: Optional[str] = None) -> OrderRecord:
        order = self.get_order(order_id)
        self.check_can_manage(user, self.get_shop(order.coffee_shop_id))
        if not order.status.is_active:
            raise ServiceValidationError(f"Order is already {order.status.value}")
        if status == OrderStatus.CANCELLED:
            actor = (
                CancellationActor.ADMIN
                if user.has_role(RoleName.SUPERADMIN)
                else CancellationActor.COFFEE_SHOP
            )
            self._cancel(order, user, actor, comment)
        else:
            self._record_status(order, status, user.id, comment)
        return order

    def orders_of_user(self, user_id: str, statuses: Optional[Iterable[OrderStatus]] = None) -> List[OrderRecord]:
        wanted = set(statuses) if statuses else None
        found = [
            o for o in self.orders.values()
            if o.user_id == user_id and (wanted is None or o.status in wanted)
        ]
        return sorted(found, key=lambda o: o.created_at, reverse=True)

    def orders_of_shop(
        self,
        coffee_shop_id: str,
        statuses: Optional[Iterable[OrderStatus]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[OrderRecord]:
        wanted = set(statuses) if statuses else None
        found = []
        for order in self.orders.values():
            if order.coffee_shop_id != coffee_shop_id:
                continue
            if wanted is not None and order.status not in wanted:
                continue
            if start is not None and order.created_at < start:
                continue
            if end is not None and order.created_at > end:
                continue
            found.append(order)
        return sorted(found, key=lambda o: o.created_at, reverse=True)

    def render_order(self, order: OrderRecord) -> dict:
        """JSON body of an order, with the shop embedded"""
        body = order.to_payload(exclude_none=False)
        shop = self.coffee_shops.get(order.coffee_shop_id)
        if shop is not None:
            body["coffeeShop"] = {"id": shop.id, "name": shop.name, "address": shop.address}
            body["coffeeShopName"] = shop.name
        return body


# ============================================================================
# Seed data
# ============================================================================


def _hours(open_time: str, close_time: str, closed_days: Iterable[int] = ()) -> Dict[str, WorkingHoursPeriod]:
    closed = set(closed_days)
    return {
        str(day): WorkingHoursPeriod(open=open_time, close=close_time, is_closed=day in closed)
        for day in range(7)
    }


def _sizes(item_id: str, medium: str, large: str) -> List[Size]:
    return [
        Size(id=f"{item_id}-s", name="Small", abbreviation="S", order=0),
        Size(id=f"{item_id}-m", name="Medium", abbreviation="M", additional_price=Decimal(medium), is_default=True, order=1),
        Size(id=f"{item_id}-l", name="Large", abbreviation="L", additional_price=Decimal(large), order=2),
    ]


def _milk_option() -> CustomizationOption:
    return CustomizationOption(
        id="opt-milk",
        name="Milk",
        required=True,
        choices=[
            CustomizationChoice(id="choice-cow-milk", name="Cow milk"),
            CustomizationChoice(id="choice-oat-milk", name="Oat milk", price=Decimal("15")),
            CustomizationChoice(id="choice-almond-milk", name="Almond milk", price=Decimal("20")),
        ],
    )


def _syrup_option() -> CustomizationOption:
    return CustomizationOption(
        id="opt-syrup",
        name="Syrup",
        allow_multiple_choices=True,
        choices=[
            CustomizationChoice(
                id="choice-vanilla",
                name="Vanilla",
                price=Decimal("10"),
                allow_quantity=True,
                default_quantity=1,
                max_quantity=3,
                price_per_additional_unit=Decimal("5"),
            ),
            CustomizationChoice(id="choice-caramel", name="Caramel", price=Decimal("10")),
        ],
    )


def seed_store(store: SandboxStore) -> None:
    """Three users, two coffee shops and their menus"""
    for role_id, name, description in (
        ("role-superadmin", RoleName.SUPERADMIN.value, "Full access"),
        ("role-owner", RoleName.COFFEE_SHOP_OWNER.value, "Manages own coffee shops"),
    ):
        store.roles[role_id] = Role(id=role_id, name=name, description=description)

    store.add_user("admin@nidus.test", "admin123", [RoleName.SUPERADMIN.value], user_id="user-admin", first_name="Olena", last_name="Admin")
    store.add_user("owner@nidus.test", "owner123", [RoleName.COFFEE_SHOP_OWNER.value], user_id="user-owner", first_name="Taras", last_name="Bondar")
    store.add_user("customer@nidus.test", "customer123", user_id="user-customer", first_name="Iryna", phone="+380501234567")

    podil = CoffeeShop(
        id="shop-podil",
        name="Nidus Podil",
        address="Kyiv, Sahaidachnoho St, 10",
        owner_id="user-owner",
        allow_scheduled_orders=True,
        working_hours=_hours("08:00", "22:00"),
        metadata={"latitude": 50.4637, "longitude": 30.5171},
    )
    lviv = CoffeeShop(
        id="shop-lviv",
        name="Nidus Rynok",
        address="Lviv, Rynok Square, 5",
        working_hours=_hours("09:00", "21:00", closed_days=[0]),
        metadata={"latitude": 49.8419, "longitude": 24.0315},
    )
    for shop in (podil, lviv):
        store.coffee_shops[shop.id] = shop

    groups = [
        MenuGroup(id="group-coffee", name="Coffee", display_order=0, coffee_shop_id=podil.id),
        MenuGroup(id="group-desserts", name="Desserts", display_order=1, coffee_shop_id=podil.id),
        MenuGroup(id="group-tea", name="Tea", display_order=0, coffee_shop_id=lviv.id),
    ]
    for group in groups:
        store.menu_groups[group.id] = group

    items = [
        MenuItem(
            id="item-latte",
            name="Latte",
            description="Espresso with steamed milk",
            price=Decimal("65"),
            menu_group_id="group-coffee",
            has_multiple_sizes=True,
            sizes=_sizes("item-latte", "10", "20"),
            ingredients=[
                Ingredient(
                    id="ing-espresso",
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
            customization_options=[_milk_option(), _syrup_option()],
        ),
        MenuItem(
            id="item-espresso",
            name="Espresso",
            price=Decimal("45"),
            menu_group_id="group-coffee",
        ),
        MenuItem(
            id="item-cheesecake",
            name="Cheesecake",
            description="New York style",
            price=Decimal("90"),
            menu_group_id="group-desserts",
        ),
        MenuItem(
            id="item-green-tea",
            name="Green tea",
            price=Decimal("50"),
            menu_group_id="group-tea",
        ),
    ]
    for item in items:
        store.menu_items[item.id] = item

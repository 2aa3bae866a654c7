# order placement and order queries
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable

from pizza_store.accounts import AccountManager, require_role
from pizza_store.database import DatabaseManager
from pizza_store.errors import InputError, NotFound, PermissionDenied
from pizza_store.menu import MenuManager
from pizza_store.models import (
    OrderDetail, OrderDraft, OrderStatus, PlacedOrder, Role, Session,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class OrderManager:
    """
    Order placement plus the order history / detail / status operations.

    Placement runs in three steps so the console can drive it one prompt at a
    time: ``start_order`` checks the store, ``add_line`` prices one item into
    the draft, ``submit`` allocates the id and writes header and lines in a
    single transaction. ``place_order`` chains the three.
    """
    def __init__(self, db: DatabaseManager, menu: MenuManager | None = None,
                 clock: Callable[[], datetime] = datetime.now, recent_limit: int = 5):
        self.db = db
        self.menu = menu or MenuManager(db)
        self.accounts = AccountManager(db)
        self.clock = clock
        self.recent_limit = recent_limit

    # placement
    def start_order(self, session: Session, store_id: int) -> OrderDraft:
        """step 1: the store must exist, otherwise the whole placement aborts"""
        require_role(session)
        if self.menu.get_store(store_id) is None:
            raise NotFound(f"store #{store_id} does not exist")
        return OrderDraft(login=session.login, store_id=store_id)

    def add_line(self, draft: OrderDraft, item_name: str, quantity: int) -> Decimal:
        """step 2: price one (item, quantity) pair into the draft; returns the line cost"""
        if quantity < 1:
            raise InputError("quantity must be at least 1")
        item = self.menu.get_item(item_name.strip())
        if item is None:
            raise NotFound(f"{item_name.strip()!r} not found")
        draft.add(item.name, item.price, quantity)
        return item.price * quantity

    def submit(self, session: Session, draft: OrderDraft) -> PlacedOrder:
        """step 3+4: allocate the next id and write header + lines atomically"""
        require_role(session)
        if draft.is_empty:
            raise InputError("order has no items, nothing was placed")
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        with self.db.transaction():
            # max+1 inside the transaction; a concurrent duplicate fails the primary key
            order_id = self.db.scalar_int("SELECT COALESCE(MAX(orderID), 0) + 1 FROM FoodOrder;")
            self.db.execute_update(
                """--sql
                INSERT INTO FoodOrder (orderID, login, storeID, totalPrice, orderTimestamp, orderStatus)
                VALUES (:id, :login, :store, :total, :ts, :status);
                """,
                {"id": order_id, "login": draft.login, "store": draft.store_id,
                 "total": str(draft.total), "ts": timestamp,
                 "status": OrderStatus.INCOMPLETE.value},
            )
            for name, quantity in draft.lines.items():
                self.db.execute_update(
                    """--sql
                    INSERT INTO ItemsInOrder (orderID, itemName, quantity)
                    VALUES (:id, :name, :qty);
                    """,
                    {"id": order_id, "name": name, "qty": quantity},
                )
        logger.info("order #%d placed by %r (%d lines, total %s)",
                    order_id, draft.login, len(draft.lines), draft.total)
        return PlacedOrder(order_id, draft.total, dict(draft.lines))

    def place_order(self, session: Session, store_id: int,
                    lines: Iterable[tuple[str, int]]) -> PlacedOrder:
        """non-interactive placement; any unknown item aborts the whole order"""
        draft = self.start_order(session, store_id)
        for name, quantity in lines:
            self.add_line(draft, name, quantity)
        return self.submit(session, draft)

    # history
    def _history_login(self, session: Session, login: str | None) -> str:
        require_role(session)
        login = (login or session.login).strip()
        if login != session.login and not session.is_staff:
            raise PermissionDenied("customers can only view their own orders")
        if login != session.login and not self.accounts.user_exists(login):
            raise NotFound(f"user {login!r} does not exist")
        return login

    def list_order_ids(self, session: Session, login: str | None = None) -> list[int]:
        """every order id for a login, newest first"""
        login = self._history_login(session, login)
        rows = self.db.execute_query(
            """--sql
            SELECT orderID FROM FoodOrder
            WHERE login = :login
            ORDER BY orderTimestamp DESC, orderID DESC;
            """,
            {"login": login},
        )
        return [int(r[0]) for r in rows]

    def list_recent_order_ids(self, session: Session, login: str | None = None) -> list[int]:
        """the newest few order ids for a login"""
        login = self._history_login(session, login)
        rows = self.db.execute_query(
            """--sql
            SELECT orderID FROM FoodOrder
            WHERE login = :login
            ORDER BY orderTimestamp DESC, orderID DESC
            LIMIT :limit;
            """,
            {"login": login, "limit": self.recent_limit},
        )
        return [int(r[0]) for r in rows]

    def get_order_info(self, session: Session, order_id: int) -> OrderDetail:
        """order header plus its lines; customers only see their own orders"""
        require_role(session)
        rows = self.db.execute_query(
            """--sql
            SELECT o.orderID, o.login, o.storeID, o.totalPrice, o.orderTimestamp,
                   o.orderStatus, l.itemName, l.quantity
            FROM FoodOrder o
            LEFT JOIN ItemsInOrder l ON l.orderID = o.orderID
            WHERE o.orderID = :id
            ORDER BY l.itemName;
            """,
            {"id": order_id},
        )
        if not rows:
            raise NotFound(f"order #{order_id} does not exist")
        oid, login, store_id, total, ts, status = rows[0][:6]
        if login != session.login and not session.is_staff:
            raise PermissionDenied(f"order #{order_id} belongs to another user")
        items = ", ".join(f"{r[6]} x{r[7]}" for r in rows if r[6] is not None)
        return OrderDetail(int(oid), login, int(store_id), Decimal(total), ts,
                           (status or "").strip(), items)

    # status
    def update_order_status(self, session: Session, order_id: int, status: str):
        require_role(session, Role.DRIVER, Role.MANAGER)
        parsed = OrderStatus.parse(status)
        changed = self.db.execute_update(
            "UPDATE FoodOrder SET orderStatus = :status WHERE orderID = :id;",
            {"status": parsed.value, "id": order_id},
        )
        if not changed:
            raise NotFound(f"order #{order_id} does not exist")
        logger.info("order #%d marked %s by %r", order_id, parsed.value, session.login)

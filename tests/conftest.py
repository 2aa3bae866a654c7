from datetime import datetime, timedelta

import pytest
from sqlalchemy.pool import StaticPool

from pizza_store.accounts import AccountManager
from pizza_store.admin import AdminManager
from pizza_store.database import DatabaseManager
from pizza_store.menu import MenuManager
from pizza_store.models import Role, Session
from pizza_store.orders import OrderManager
from pizza_store.schema import create_schema

ITEMS = [
    ("Margherita", "tomato, mozzarella", "entree", "10.00", "classic"),
    ("Pepperoni", "tomato, mozzarella, pepperoni", "entree", "12.50", "spicy"),
    ("Garlic Bread", "bread, garlic", "sides", "4.50", None),
    ("Cola", "cola", "drinks", "2.00", "can"),
]
STORES = [
    (1, "1 Main St", "Riverside", "CA", "yes", "4.5"),
    (2, "2 Side St", "Riverside", "CA", "no", None),
]
USERS = [
    ("alice", "pw", "customer", "111"),
    ("bob", "pw", "customer", "222"),
    ("dave", "pw", "driver", "333"),
    ("mgr", "pw", "manager", "444"),
]


class FakeClock:
    """strictly increasing timestamps, one minute apart"""
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def db():
    manager = DatabaseManager("sqlite://", poolclass=StaticPool)
    create_schema(manager)
    with manager.transaction():
        for row in ITEMS:
            manager.execute_update(
                "INSERT INTO Items VALUES (:name, :ingredients, :kind, :price, :description);",
                dict(zip(("name", "ingredients", "kind", "price", "description"), row)),
            )
        for row in STORES:
            manager.execute_update(
                "INSERT INTO Store VALUES (:id, :address, :city, :state, :open, :score);",
                dict(zip(("id", "address", "city", "state", "open", "score"), row)),
            )
        for login, password, role, phone in USERS:
            manager.execute_update(
                "INSERT INTO Users VALUES (:login, :password, :role, NULL, :phone);",
                {"login": login, "password": password, "role": role, "phone": phone},
            )
    yield manager
    manager.close()


@pytest.fixture
def accounts(db):
    return AccountManager(db)


@pytest.fixture
def menu(db):
    return MenuManager(db)


@pytest.fixture
def orders(db, menu):
    return OrderManager(db, menu, clock=FakeClock())


@pytest.fixture
def admin(db):
    return AdminManager(db)


@pytest.fixture
def alice():
    return Session("alice", Role.CUSTOMER)


@pytest.fixture
def bob():
    return Session("bob", Role.CUSTOMER)


@pytest.fixture
def driver():
    return Session("dave", Role.DRIVER)


@pytest.fixture
def manager():
    return Session("mgr", Role.MANAGER)

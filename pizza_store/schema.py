# schema bootstrap (--init-schema); the production database normally ships
# with these tables already, so everything here is IF NOT EXISTS / no-op on rerun
import logging

from pizza_store.database import DatabaseManager

logger = logging.getLogger(__name__)

# portable between postgres and sqlite; unquoted names so postgres folds case
TABLES = [
    """--sql
    CREATE TABLE IF NOT EXISTS Items (
        itemName VARCHAR(50) PRIMARY KEY,
        ingredients VARCHAR(300) NOT NULL,
        typeOfItem VARCHAR(40) NOT NULL,
        price NUMERIC(10, 2) NOT NULL CHECK (price >= 0),
        description TEXT
    );
    """,
    """--sql
    CREATE TABLE IF NOT EXISTS Users (
        login VARCHAR(50) PRIMARY KEY,
        password VARCHAR(30) NOT NULL, -- plain text, same as the legacy data
        role VARCHAR(20) NOT NULL,
        favoriteItems VARCHAR(50) REFERENCES Items(itemName) ON UPDATE CASCADE ON DELETE SET NULL,
        phoneNum VARCHAR(20)
    );
    """,
    """--sql
    CREATE TABLE IF NOT EXISTS Store (
        storeID INTEGER PRIMARY KEY,
        address VARCHAR(100) NOT NULL,
        city VARCHAR(50) NOT NULL,
        state VARCHAR(50) NOT NULL,
        isOpen VARCHAR(10) NOT NULL,
        reviewScore NUMERIC(4, 2)
    );
    """,
    """--sql
    CREATE TABLE IF NOT EXISTS FoodOrder (
        orderID INTEGER PRIMARY KEY,
        login VARCHAR(50) NOT NULL REFERENCES Users(login) ON UPDATE CASCADE,
        storeID INTEGER NOT NULL REFERENCES Store(storeID),
        totalPrice NUMERIC(10, 2) NOT NULL,
        orderTimestamp TIMESTAMP NOT NULL,
        orderStatus VARCHAR(50) NOT NULL
    );
    """,
    """--sql
    CREATE TABLE IF NOT EXISTS ItemsInOrder (
        orderID INTEGER NOT NULL REFERENCES FoodOrder(orderID) ON DELETE CASCADE,
        itemName VARCHAR(50) NOT NULL REFERENCES Items(itemName) ON UPDATE CASCADE,
        quantity INTEGER NOT NULL CHECK (quantity > 0),
        PRIMARY KEY (orderID, itemName)
    );
    """,
]

DEMO_ITEMS = [
    ("Margherita", "tomato sauce, mozzarella, basil", "entree", "10.00", "the classic"),
    ("Pepperoni", "tomato sauce, mozzarella, pepperoni", "entree", "12.50", "spicy and greasy"),
    ("Veggie Supreme", "peppers, onion, olives, mushroom", "entree", "13.00", "loaded with veg"),
    ("Garlic Bread", "bread, garlic butter", "sides", "4.50", "six pieces"),
    ("Cola", "cola", "drinks", "2.00", "330ml can"),
    ("Lemonade", "lemon, sugar, water", "drinks", "2.50", "freshly squeezed"),
]

DEMO_STORES = [
    (1, "900 University Ave", "Riverside", "CA", "yes", "4.5"),
    (2, "3663 Canyon Crest Dr", "Riverside", "CA", "no", "3.8"),
]


def create_schema(db: DatabaseManager):
    """create tables if missing"""
    with db.transaction():
        for ddl in TABLES:
            db.execute_update(ddl)
    logger.info("schema ready")


def seed_demo_data(db: DatabaseManager):
    """seed a catalog, stores and a default manager once"""
    with db.transaction():
        for name, ingredients, kind, price, description in DEMO_ITEMS:
            db.execute_update(
                """--sql
                INSERT INTO Items (itemName, ingredients, typeOfItem, price, description)
                VALUES (:name, :ingredients, :kind, :price, :description)
                ON CONFLICT DO NOTHING;
                """,
                {"name": name, "ingredients": ingredients, "kind": kind,
                 "price": price, "description": description},
            )
        for store_id, address, city, state, is_open, score in DEMO_STORES:
            db.execute_update(
                """--sql
                INSERT INTO Store (storeID, address, city, state, isOpen, reviewScore)
                VALUES (:id, :address, :city, :state, :open, :score)
                ON CONFLICT DO NOTHING;
                """,
                {"id": store_id, "address": address, "city": city, "state": state,
                 "open": is_open, "score": score},
            )
        db.execute_update(
            """--sql
            INSERT INTO Users (login, password, role, favoriteItems, phoneNum)
            VALUES ('admin', 'admin', 'manager', NULL, '000-000-0000')
            ON CONFLICT DO NOTHING;
            """
        )
    logger.info("demo data seeded")

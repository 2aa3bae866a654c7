# menu / store queries (read only)
from decimal import Decimal

from pizza_store.database import DatabaseManager
from pizza_store.errors import InputError
from pizza_store.models import MenuItem, Store

ITEM_COLUMNS = "itemName, ingredients, typeOfItem, price, description"
STORE_COLUMNS = "storeID, address, city, state, isOpen, reviewScore"


class MenuManager:
    """catalog and store listing"""
    def __init__(self, db: DatabaseManager):
        self.db = db

    def list_items(self, type_filter: str | None = None, max_price: Decimal | None = None,
                   ascending: bool | None = None) -> list[MenuItem]:
        """filtered menu; filters AND together, ascending=None keeps db order"""
        clauses, params = [], {}
        if type_filter:
            clauses.append("typeOfItem = :kind")
            params["kind"] = type_filter.strip()
        if max_price is not None:
            if max_price < 0:
                raise InputError("maximum price must be non-negative")
            clauses.append("price <= :max_price")
            params["max_price"] = str(max_price)
        sql = f"SELECT {ITEM_COLUMNS} FROM Items"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if ascending is not None:
            sql += " ORDER BY price " + ("ASC" if ascending else "DESC")
        return [MenuItem.from_row(r) for r in self.db.execute_query(sql + ";", params)]

    def get_item(self, name: str) -> MenuItem | None:
        rows = self.db.execute_query(
            f"SELECT {ITEM_COLUMNS} FROM Items WHERE itemName = :name;", {"name": name}
        )
        return MenuItem.from_row(rows[0]) if rows else None

    def list_stores(self) -> list[Store]:
        rows = self.db.execute_query(f"SELECT {STORE_COLUMNS} FROM Store ORDER BY storeID;")
        return [Store.from_row(r) for r in rows]

    def get_store(self, store_id: int) -> Store | None:
        rows = self.db.execute_query(
            f"SELECT {STORE_COLUMNS} FROM Store WHERE storeID = :id;", {"id": store_id}
        )
        return Store.from_row(rows[0]) if rows else None

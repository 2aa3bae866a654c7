# manager-only menu and account administration
import logging
from decimal import Decimal

from pizza_store.accounts import require_role
from pizza_store.database import DatabaseManager
from pizza_store.errors import Conflict, InputError, NotFound
from pizza_store.models import Role, Session, UserSummary, parse_money

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AdminManager:
    """menu edits and user edits; every method checks for the manager role itself"""
    def __init__(self, db: DatabaseManager):
        self.db = db

    def _item_exists(self, name: str) -> bool:
        return self.db.count(
            "SELECT COUNT(*) FROM Items WHERE itemName = :name;", {"name": name}
        ) > 0

    def _user_exists(self, login: str) -> bool:
        return self.db.count(
            "SELECT COUNT(*) FROM Users WHERE login = :login;", {"login": login}
        ) > 0

    # menu
    def update_item(self, session: Session, item_name: str, *, new_name: str | None = None,
                    ingredients: str | None = None, type_of_item: str | None = None,
                    price: str | Decimal | None = None, description: str | None = None):
        """edit in place; blank / None fields are left unchanged"""
        require_role(session, Role.MANAGER)
        item_name = item_name.strip()
        changes: dict[str, str] = {}
        if not _blank(new_name) and new_name.strip() != item_name:
            changes["itemName"] = new_name.strip()
        if not _blank(ingredients):
            changes["ingredients"] = ingredients.strip()
        if not _blank(type_of_item):
            changes["typeOfItem"] = type_of_item.strip()
        if price is not None and str(price).strip():
            changes["price"] = str(parse_money(str(price)))
        if not _blank(description):
            changes["description"] = description.strip()
        if not changes:
            raise InputError("nothing to update")

        with self.db.transaction():
            if not self._item_exists(item_name):
                raise NotFound(f"item {item_name!r} does not exist")
            if "itemName" in changes and self._item_exists(changes["itemName"]):
                raise Conflict(f"item {changes['itemName']!r} already exists")
            # keys are the fixed column names above
            assignments = ", ".join(f"{col} = :{col}" for col in changes)
            self.db.execute_update(
                f"UPDATE Items SET {assignments} WHERE itemName = :current;",
                {**changes, "current": item_name},
            )
        logger.info("item %r updated by %r: %s", item_name, session.login, sorted(changes))

    def add_item(self, session: Session, item_name: str, ingredients: str,
                 type_of_item: str, price: str | Decimal, description: str):
        """insert a new menu item; every field is mandatory"""
        require_role(session, Role.MANAGER)
        fields = {"item name": item_name, "ingredients": ingredients,
                  "item type": type_of_item, "description": description}
        missing = [label for label, value in fields.items() if _blank(value)]
        if missing:
            raise InputError("empty values are not allowed: " + ", ".join(missing))
        amount = parse_money(str(price) if price is not None else None)

        with self.db.transaction():
            if self._item_exists(item_name.strip()):
                raise Conflict(f"item {item_name.strip()!r} already exists")
            self.db.execute_update(
                """--sql
                INSERT INTO Items (itemName, ingredients, typeOfItem, price, description)
                VALUES (:name, :ingredients, :kind, :price, :description);
                """,
                {"name": item_name.strip(), "ingredients": ingredients.strip(),
                 "kind": type_of_item.strip(), "price": str(amount),
                 "description": description.strip()},
            )
        logger.info("item %r added by %r", item_name.strip(), session.login)

    # users
    def list_users(self, session: Session) -> list[UserSummary]:
        require_role(session, Role.MANAGER)
        rows = self.db.execute_query("SELECT login, role, phoneNum FROM Users ORDER BY login;")
        return [UserSummary(login, (role or "").strip(), phone) for login, role, phone in rows]

    def change_login(self, session: Session, login: str, new_login: str):
        """rename a user; refuses a name that is already taken"""
        require_role(session, Role.MANAGER)
        login, new_login = login.strip(), new_login.strip()
        if not new_login:
            raise InputError("new login is required")
        with self.db.transaction():
            if not self._user_exists(login):
                raise NotFound(f"user {login!r} does not exist")
            if self._user_exists(new_login):
                raise Conflict(f"login {new_login!r} is already taken")
            self.db.execute_update(
                "UPDATE Users SET login = :new WHERE login = :old;",
                {"new": new_login, "old": login},
            )
        if session.login == login:
            session.login = new_login
        logger.info("user %r renamed to %r by %r", login, new_login, session.login)

    def change_role(self, session: Session, login: str, role: str):
        require_role(session, Role.MANAGER)
        login = login.strip()
        parsed = Role.parse(role)
        changed = self.db.execute_update(
            "UPDATE Users SET role = :role WHERE login = :login;",
            {"role": parsed.value, "login": login},
        )
        if not changed:
            raise NotFound(f"user {login!r} does not exist")
        if session.login == login:
            session.role = parsed
        logger.info("user %r is now %s (by %r)", login, parsed.value, session.login)

# accounts/auth
import logging

from pizza_store.database import DatabaseManager
from pizza_store.errors import InputError, NotFound, PermissionDenied
from pizza_store.models import Profile, Role, Session

logger = logging.getLogger(__name__)


def require_role(session: Session | None, *roles: Role):
    """guard for privileged actions; raises PermissionDenied"""
    if session is None:
        raise PermissionDenied("please log in first")
    if roles and session.role not in roles:
        allowed = "/".join(r.value for r in roles)
        raise PermissionDenied(f"{allowed} privileges required")


def stored_role(value: str | None, login: str) -> Role:
    """map a Users.role value to a Role; unknown values get least privilege"""
    try:
        return Role((value or "").strip().lower())
    except ValueError:
        logger.warning("user %r has unknown role %r, treating as customer", login, value)
        return Role.CUSTOMER


class AccountManager:
    """user accounts, login and the logged-in user's own profile"""
    def __init__(self, db: DatabaseManager):
        self.db = db

    def user_exists(self, login: str) -> bool:
        """check if login exists"""
        return self.db.count(
            "SELECT COUNT(*) FROM Users WHERE login = :login;", {"login": login}
        ) > 0

    def create_account(self, login: str, password: str, role: str, phone: str):
        """insert a new user with no favorite item; duplicates are left to the primary key"""
        login, phone = login.strip(), phone.strip()
        if not login:
            raise InputError("login is required")
        if not password:
            raise InputError("password is required")
        parsed = Role.parse(role)
        self.db.execute_update(
            """--sql
            INSERT INTO Users (login, password, role, favoriteItems, phoneNum)
            VALUES (:login, :password, :role, NULL, :phone);
            """,
            {"login": login, "password": password, "role": parsed.value, "phone": phone},
        )
        logger.info("created %s account %r", parsed.value, login)

    def log_in(self, login: str, password: str) -> Session | None:
        """exact credential match; None (and no session) on a miss"""
        rows = self.db.execute_query(
            "SELECT login, role FROM Users WHERE login = :login AND password = :password;",
            {"login": login, "password": password},
        )
        if not rows:
            logger.info("failed login for %r", login)
            return None
        user_login, role = rows[0]
        session = Session(user_login, stored_role(role, user_login))
        logger.info("%r logged in as %s", user_login, session.role.value)
        return session

    # profile
    def view_profile(self, session: Session) -> Profile:
        require_role(session)
        rows = self.db.execute_query(
            "SELECT login, role, favoriteItems, phoneNum FROM Users WHERE login = :login;",
            {"login": session.login},
        )
        if not rows:
            raise NotFound(f"user {session.login!r} no longer exists")
        login, role, favorite, phone = rows[0]
        return Profile(login, (role or "").strip(), favorite, phone)

    def update_favorite_item(self, session: Session, item_name: str):
        """set favorite item; the item must be on the menu, checked in the same statement"""
        require_role(session)
        item_name = item_name.strip()
        changed = self.db.execute_update(
            """--sql
            UPDATE Users SET favoriteItems = :item
            WHERE login = :login
              AND EXISTS (SELECT 1 FROM Items WHERE itemName = :item);
            """,
            {"item": item_name, "login": session.login},
        )
        if not changed:
            raise NotFound(f"{item_name!r} is not on the menu")

    def update_phone(self, session: Session, phone: str):
        require_role(session)
        phone = phone.strip()
        if not phone:
            raise InputError("phone number is required")
        self._update_own(session, "phoneNum", phone)

    def update_password(self, session: Session, password: str):
        require_role(session)
        if not password:
            raise InputError("password is required")
        self._update_own(session, "password", password)

    def _update_own(self, session: Session, column: str, value: str):
        # column comes from the two callers above, never from input
        changed = self.db.execute_update(
            f"UPDATE Users SET {column} = :value WHERE login = :login;",
            {"value": value, "login": session.login},
        )
        if not changed:
            raise NotFound(f"user {session.login!r} no longer exists")

# interactive console: numbered menus on top of the managers
import argparse
import atexit
import logging
import signal
import sys
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation
from pydantic import ValidationError

from pizza_store.accounts import AccountManager
from pizza_store.admin import AdminManager
from pizza_store.config import Settings, get_settings, setup_logging
from pizza_store.database import DatabaseManager
from pizza_store.errors import DatabaseError, InputError, NotFound, PizzaStoreError
from pizza_store.menu import MenuManager
from pizza_store.models import Role, Session, parse_int, parse_money
from pizza_store.orders import OrderManager
from pizza_store.schema import create_schema, seed_demo_data

logger = logging.getLogger(__name__)

DONE_TOKEN = "done"
STAFF = (Role.DRIVER, Role.MANAGER)
MANAGERS = (Role.MANAGER,)


def color_money(amount: Decimal) -> str:
    """format amount as green money string"""
    return colored(f"${amount:.2f}", "green")


def prompt(text: str) -> str:
    return input(colored(text, "magenta"))


def read_choice() -> int:
    """read a menu number; re-prompts until the input parses"""
    while True:
        raw = input(colored("please make your choice: ", "blue")).strip()
        try:
            return int(raw)
        except ValueError:
            cprint("your input is invalid!", "red")


def choose(options: list[str]) -> int:
    """print a numbered sub-menu and read a choice inside its range"""
    for i, label in enumerate(options, start=1):
        print(f"{i}. {label}")
    while True:
        choice = read_choice()
        if 1 <= choice <= len(options):
            return choice
        cprint("please select a valid option.", "red")


@dataclass
class MenuOption:
    """bind a menu number to an action (roles=None means any logged-in user)"""
    number: int
    label: str
    action: Callable[[], None]
    roles: tuple[Role, ...] | None = None

    def visible_to(self, session: Session) -> bool:
        return self.roles is None or session.role in self.roles


class Console:
    """main menu + logged-in user menu"""
    def __init__(self, db: DatabaseManager, settings: Settings | None = None):
        settings = settings or get_settings()
        self.db = db
        self.accounts = AccountManager(db)
        self.menu = MenuManager(db)
        self.orders = OrderManager(db, self.menu, recent_limit=settings.recent_order_limit)
        self.admin = AdminManager(db)
        self.session: Session | None = None
        self.user_options = [
            MenuOption(1, "View Profile", self.view_profile),
            MenuOption(2, "Update Profile", self.update_profile),
            MenuOption(3, "View Menu", self.view_menu),
            MenuOption(4, "Place Order", self.place_order),
            MenuOption(5, "View Full Order ID History", self.view_all_orders),
            MenuOption(6, f"View Past {settings.recent_order_limit} Order IDs", self.view_recent_orders),
            MenuOption(7, "View Order Information", self.view_order_info),
            MenuOption(8, "View Stores", self.view_stores),
            MenuOption(9, "Update Order Status", self.update_order_status, STAFF),
            MenuOption(10, "Update Menu", self.update_menu, MANAGERS),
            MenuOption(11, "Update User", self.update_user, MANAGERS),
            MenuOption(12, "List Users", self.list_users, MANAGERS),
        ]

    # loop
    def run(self) -> int:
        """main menu loop; returns the process exit code"""
        try:
            while True:
                cprint("\nMAIN MENU", "green", attrs=["bold"])
                print("---------")
                print("1. Create user")
                print("2. Log in")
                print("9. < EXIT")
                choice = read_choice()
                if choice == 1:
                    self.guarded("create user", self.create_user)
                elif choice == 2:
                    self.guarded("log in", self.log_in)
                    if self.session is not None:
                        self.user_loop()
                elif choice == 9:
                    return 0
                else:
                    cprint("unrecognized choice!", "red")
        except EOFError:
            print()
            return 0

    def user_loop(self):
        """menu shown while logged in; hides options the role cannot use"""
        while self.session is not None:
            cprint("\nMAIN MENU", "green", attrs=["bold"])
            print("---------")
            visible = [o for o in self.user_options if o.visible_to(self.session)]
            for option in visible:
                print(f"{option.number}. {option.label}")
            print(".........................")
            print("20. Log out")
            choice = read_choice()
            if choice == 20:
                cprint(f"logged out {self.session.login}", "green")
                self.session = None
                return
            option = next((o for o in visible if o.number == choice), None)
            if option is None:
                cprint("unrecognized choice!", "red"); continue
            self.guarded(option.label, option.action)

    def guarded(self, name: str, action: Callable[[], None]):
        """operation boundary: report errors, never let them end the session"""
        try:
            action()
        except DatabaseError as e:
            logger.error("database error during %s: %s", name.lower(), e)
            cprint(f"database error, {name.lower()} not completed: {e}", "red")
        except PizzaStoreError as e:
            cprint(str(e), "red")

    # auth
    def create_user(self):
        login = prompt("enter username: ").strip()
        password = prompt("enter password: ")
        role = prompt("enter role (customer, driver, manager): ")
        phone = prompt("enter phone number: ")
        self.accounts.create_account(login, password, role, phone)
        cprint("user successfully created!", "green")

    def log_in(self):
        login = prompt("enter your username: ").strip()
        password = prompt("enter your password: ")
        session = self.accounts.log_in(login, password)
        if session is None:
            cprint("invalid username or password", "red"); return
        self.session = session
        prefix = f"{session.role.value}: " if session.role is not Role.CUSTOMER else ""
        cprint(f"logged in as {prefix}{colored(session.login, 'yellow', attrs=['bold'])}", "green")

    # profile
    def view_profile(self):
        profile = self.accounts.view_profile(self.session)
        print(f"\nlogin: {profile.login}")
        print(f"role: {profile.role}")
        print(f"favorite item: {profile.favorite_item or 'none'}")
        print(f"phone number: {profile.phone or 'none'}")

    def update_profile(self):
        choice = choose(["Update Favorite Item", "Update Phone Number", "Update Password", "Go Back"])
        if choice == 1:
            self.accounts.update_favorite_item(self.session, prompt("input new favorite item: "))
            cprint("favorite item updated successfully!", "green")
        elif choice == 2:
            self.accounts.update_phone(self.session, prompt("input new phone number: "))
            cprint("phone number updated successfully!", "green")
        elif choice == 3:
            self.accounts.update_password(self.session, prompt("input new password: "))
            cprint("password updated successfully!", "green")

    # catalog
    def view_menu(self):
        kind = prompt("filter by type, e.g. drinks, sides (blank to skip): ").strip() or None
        raw_price = prompt("maximum price (blank to skip): ").strip()
        max_price = parse_money(raw_price, "maximum price") if raw_price else None
        print("sort by price:\n1. lowest to highest\n2. highest to lowest\n(anything else: no sorting)")
        sort = prompt("enter your choice: ").strip()
        ascending = {"1": True, "2": False}.get(sort)
        items = self.menu.list_items(kind, max_price, ascending)
        if not items:
            cprint("no matching menu items", "yellow"); return
        cprint("\nmenu items:", "green", attrs=["bold"])
        for item in items:
            cprint(f"{item.name} ({item.type_of_item}): {color_money(item.price)}", "green")
            print(f"\t{item.ingredients}")
            if item.description:
                print(f"\t{item.description}")

    def view_stores(self):
        stores = self.menu.list_stores()
        if not stores:
            cprint("no stores found", "red"); return
        cprint("\nstore info:", "green", attrs=["bold"])
        for s in stores:
            print(f"store #{s.store_id}: {s.address}, {s.city}, {s.state}")
            print(f"\topen: {s.is_open} | review score: {s.review_score or 'n/a'}")

    # orders
    def place_order(self):
        """interactive placement: store, then items until 'done' or a blank name"""
        store_id = parse_int(prompt("enter store id: "), "store id")
        draft = self.orders.start_order(self.session, store_id)
        cprint(f"ordering from store #{store_id}; type '{DONE_TOKEN}' or leave blank to finish",
               "yellow")
        while True:
            name = prompt("item name: ").strip()
            if not name or name.lower() == DONE_TOKEN:
                break
            quantity = parse_int(prompt("quantity: "), "quantity", minimum=1)
            try:
                cost = self.orders.add_line(draft, name, quantity)
            except NotFound as e:
                cprint(f"{e}, try again", "red"); continue
            print(f"added {quantity} x {name} ({color_money(cost)}), "
                  f"running total {color_money(draft.total)}")
        if draft.is_empty:
            cprint("no items entered, order abandoned", "yellow"); return
        placed = self.orders.submit(self.session, draft)
        cprint(f"order #{placed.order_id} placed! total: {color_money(placed.total)}", "green")

    def _login_for_history(self) -> str | None:
        if self.session.is_staff:
            return prompt("login to look up (blank for your own): ").strip() or None
        return None

    def view_all_orders(self):
        ids = self.orders.list_order_ids(self.session, self._login_for_history())
        if not ids:
            cprint("no orders found", "yellow"); return
        print("order ids:", ", ".join(str(i) for i in ids))

    def view_recent_orders(self):
        ids = self.orders.list_recent_order_ids(self.session, self._login_for_history())
        if not ids:
            cprint("no orders found", "yellow"); return
        print("recent order ids:", ", ".join(str(i) for i in ids))

    def view_order_info(self):
        order_id = parse_int(prompt("enter order id: "), "order id")
        d = self.orders.get_order_info(self.session, order_id)
        cprint(f"\norder #{d.order_id} ({d.status})", "green", attrs=["bold"])
        print(f"\tcustomer: {d.login}")
        print(f"\tstore: #{d.store_id}")
        print(f"\tplaced: {d.timestamp}")
        print(f"\titems: {d.items or 'none'}")
        print(f"\ttotal: {color_money(d.total)}")

    def update_order_status(self):
        order_id = parse_int(prompt("enter the order id to edit: "), "order id")
        status = prompt("enter the new order status (complete/incomplete): ")
        self.orders.update_order_status(self.session, order_id, status)
        cprint(f"order #{order_id} updated", "green")

    # administration
    def update_menu(self):
        choice = choose(["Update Existing Item", "Add New Item", "Go Back"])
        if choice == 1:
            name = prompt("item name to edit: ").strip()
            if self.menu.get_item(name) is None:
                raise NotFound(f"item {name!r} does not exist")
            self.admin.update_item(
                self.session, name,
                new_name=prompt("new item name (blank to skip): "),
                ingredients=prompt("new ingredient(s) (blank to skip): "),
                type_of_item=prompt("new item type (blank to skip): "),
                price=prompt("new price (blank to skip): "),
                description=prompt("new description (blank to skip): "),
            )
            cprint("item updated", "green")
        elif choice == 2:
            self.admin.add_item(
                self.session,
                prompt("item name: "),
                prompt("ingredient(s): "),
                prompt("item type: "),
                prompt("price: "),
                prompt("description: "),
            )
            cprint("item successfully created!", "green")

    def update_user(self):
        login = prompt("login of the user to edit: ").strip()
        if not self.accounts.user_exists(login):
            raise NotFound(f"user {login!r} does not exist")
        choice = choose(["Update Login", "Update Role", "Go Back"])
        if choice == 1:
            self.admin.change_login(self.session, login, prompt("new login for the user: "))
        elif choice == 2:
            self.admin.change_role(self.session, login, prompt("new role for the user: "))
        else:
            return
        cprint("user updated successfully!", "green")

    def list_users(self):
        for u in self.admin.list_users(self.session):
            print(f"{u.login} ({u.role}) {u.phone or ''}".rstrip())


class SignalHandler:
    """ctrl+c leaves quietly"""
    @staticmethod
    def sigint(_, __):
        cprint("\nnext time, use the exit option!", "yellow")
        sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pizza-store", description="pizza store ordering console"
    )
    parser.add_argument("dbname", help="database name")
    parser.add_argument("port", help="database server port")
    parser.add_argument("user", help="database user (password comes from PIZZA_STORE_DB_PASSWORD)")
    parser.add_argument("--init-schema", action="store_true",
                        help="create missing tables and seed demo data before starting")
    return parser


def connect(settings: Settings, dbname: str, port: str, user: str) -> DatabaseManager:
    try:
        url = settings.database_url(dbname, port, user)
    except ValueError:
        raise InputError(f"invalid port: {port!r}") from None
    return DatabaseManager(url, echo=False)


def main(argv: list[str] | None = None) -> int:
    """entrypoint: connect, optionally bootstrap, run the menus"""
    args = build_parser().parse_args(argv)
    enable_windows_ansi_interpretation()
    try:
        settings = get_settings()
    except ValidationError as e:
        cprint(f"error - invalid configuration:\n{e}", "red", file=sys.stderr)
        return 1
    setup_logging()
    signal.signal(signal.SIGINT, SignalHandler.sigint)

    cprint("\n*** pizza store ordering console ***\n", "green", attrs=["bold"])
    print("connecting to database...")
    try:
        db = connect(settings, args.dbname, args.port, args.user)
    except PizzaStoreError as e:
        cprint(f"error - unable to connect to database: {e}", "red", file=sys.stderr)
        print("make sure postgres is running on this machine", file=sys.stderr)
        return 1
    atexit.register(db.close)

    if args.init_schema:
        try:
            create_schema(db)
            seed_demo_data(db)
        except DatabaseError as e:
            logger.error("schema bootstrap failed: %s", e)
            return 1

    try:
        code = Console(db, settings).run()
    finally:
        print("disconnecting from database...")
        db.close()
    cprint("bye!", "green")
    return code

# domain models
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

from pizza_store.errors import InputError

CENT = Decimal("0.01")


class Role(Enum):
    """privilege tier stored in Users.role"""
    CUSTOMER = "customer"
    DRIVER = "driver"
    MANAGER = "manager"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """strict parse of user input; raises InputError outside the set"""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            raise InputError(f"role must be one of: {valid}") from None


class OrderStatus(Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InputError(f"order status must be one of: {valid}") from None


def parse_money(value: str | None, field_name: str = "price") -> Decimal:
    """parse a non-negative decimal amount, rounded to cents"""
    if value is None or not str(value).strip():
        raise InputError(f"{field_name} is required")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InputError(f"invalid {field_name}: {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise InputError(f"{field_name} must be a non-negative number")
    return amount.quantize(CENT)


def parse_int(value: str | None, field_name: str, minimum: int | None = None) -> int:
    """parse an integer field; raises InputError if malformed or below minimum"""
    try:
        v = int(str(value).strip())
    except (TypeError, ValueError):
        raise InputError(f"invalid {field_name}: {value!r}") from None
    if minimum is not None and v < minimum:
        raise InputError(f"{field_name} must be at least {minimum}")
    return v


@dataclass
class Session:
    """the logged-in user; passed to every operation that checks privileges"""
    login: str
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.DRIVER, Role.MANAGER)


@dataclass(frozen=True)
class Profile:
    login: str
    role: str
    favorite_item: str | None
    phone: str | None


@dataclass(frozen=True)
class MenuItem:
    name: str
    ingredients: str
    type_of_item: str
    price: Decimal
    description: str | None

    @classmethod
    def from_row(cls, row: list[str | None]) -> "MenuItem":
        name, ingredients, kind, price, description = row
        return cls(name, ingredients or "", kind or "", Decimal(price), description)


@dataclass(frozen=True)
class Store:
    store_id: int
    address: str
    city: str
    state: str
    is_open: str
    review_score: str | None

    @classmethod
    def from_row(cls, row: list[str | None]) -> "Store":
        store_id, address, city, state, is_open, score = row
        return cls(int(store_id), address, city, state, is_open, score)


@dataclass
class OrderDraft:
    """order being collected; lines merge repeated item names"""
    login: str
    store_id: int
    lines: dict[str, int] = field(default_factory=dict)
    total: Decimal = Decimal("0.00")

    def add(self, item_name: str, unit_price: Decimal, quantity: int):
        self.lines[item_name] = self.lines.get(item_name, 0) + quantity
        self.total = (self.total + unit_price * quantity).quantize(CENT)

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    total: Decimal
    lines: dict[str, int]


@dataclass(frozen=True)
class OrderDetail:
    order_id: int
    login: str
    store_id: int
    total: Decimal
    timestamp: str
    status: str
    items: str  # e.g. "Cola x1, Margherita x2"


@dataclass(frozen=True)
class UserSummary:
    login: str
    role: str
    phone: str | None

# error types raised by the managers; the console catches these at the
# operation boundary and reports them instead of crashing


class PizzaStoreError(Exception):
    """base class for every error the app reports to the user"""


class InputError(PizzaStoreError):
    """malformed or missing user input"""


class NotFound(PizzaStoreError):
    """referenced user / item / store / order does not exist"""


class Conflict(PizzaStoreError):
    """write would collide with an existing row"""


class PermissionDenied(PizzaStoreError):
    """session role is not allowed to run the operation"""


class DatabaseError(PizzaStoreError):
    """driver-level failure (constraint violation, lost connection, ...)"""

# database layer
import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator, Mapping

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, CursorResult
from sqlalchemy.exc import SQLAlchemyError

from pizza_store.errors import DatabaseError

logger = logging.getLogger(__name__)

Params = Mapping[str, Any] | None


def _driver_message(exc: SQLAlchemyError) -> str:
    """prefer the underlying driver message over sqlalchemy's wrapper text"""
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc).strip()


def _render(value: Any) -> str | None:
    """render a column value as text (NULL stays None)"""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


class DatabaseManager:
    """one long-lived connection; every call gets its own short-lived result"""
    def __init__(self, url: str | URL, **engine_kwargs: Any):
        try:
            self.engine = create_engine(url, **engine_kwargs)
            self.conn: Connection | None = self.engine.connect()
        except SQLAlchemyError as e:
            raise DatabaseError(_driver_message(e)) from e
        self._in_transaction = False
        if self.engine.dialect.name == "sqlite":
            self.conn.exec_driver_sql("PRAGMA foreign_keys=ON;")
            self.conn.commit()
        logger.info("connected to %s", self.engine.url.render_as_string(hide_password=True))

    def _run(self, statement: str, params: Params) -> CursorResult:
        """execute one statement; commit/rollback unless inside transaction()"""
        if self.conn is None:
            raise DatabaseError("connection is closed")
        # parameter names only; values can hold passwords
        logger.debug("sql: %s | params: %s", " ".join(statement.split()), sorted(params or {}))
        try:
            return self.conn.execute(text(statement), dict(params or {}))
        except SQLAlchemyError as e:
            if not self._in_transaction:
                self.conn.rollback()
            raise DatabaseError(_driver_message(e)) from e

    def _finish(self):
        if not self._in_transaction and self.conn is not None:
            self.conn.commit()

    def execute_update(self, statement: str, params: Params = None) -> int:
        """run a mutating statement, return the affected row count"""
        result = self._run(statement, params)
        try:
            return result.rowcount
        finally:
            result.close()
            self._finish()

    def execute_query(self, statement: str, params: Params = None) -> list[list[str | None]]:
        """run a read, return every row as a list of text values"""
        result = self._run(statement, params)
        try:
            return [[_render(v) for v in row] for row in result]
        finally:
            result.close()
            self._finish()

    def scalar_int(self, statement: str, params: Params = None) -> int:
        """first column of the first row as an int (0 when empty or NULL)"""
        rows = self.execute_query(statement, params)
        if not rows or rows[0][0] is None:
            return 0
        return int(rows[0][0])

    def count(self, statement: str, params: Params = None) -> int:
        """run a SELECT COUNT(*) style query and return the number"""
        return self.scalar_int(statement, params)

    def current_sequence_value(self, name: str) -> int:
        """current value of a named sequence, -1 if unavailable"""
        try:
            rows = self.execute_query("SELECT currval(:name);", {"name": name})
        except DatabaseError as e:
            logger.debug("currval(%s) unavailable: %s", name, e)
            return -1
        if not rows or rows[0][0] is None:
            return -1
        return int(rows[0][0])

    @contextmanager
    def transaction(self) -> Iterator["DatabaseManager"]:
        """group statements into one commit; any exception rolls all of them back"""
        if self.conn is None:
            raise DatabaseError("connection is closed")
        if self._in_transaction:
            raise RuntimeError("transactions do not nest")
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self.conn.rollback()
            logger.warning("transaction rolled back")
            raise
        else:
            try:
                self.conn.commit()
            except SQLAlchemyError as e:
                self.conn.rollback()
                raise DatabaseError(_driver_message(e)) from e
        finally:
            self._in_transaction = False

    def close(self):
        """release the connection (safe to call twice)"""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            self.engine.dispose()
            logger.info("disconnected from database")

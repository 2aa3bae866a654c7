from decimal import Decimal

import pytest

from pizza_store.database import DatabaseManager
from pizza_store.errors import DatabaseError


def test_query_returns_rows_of_text(db):
    rows = db.execute_query(
        "SELECT itemName, price, description FROM Items WHERE typeOfItem = :kind ORDER BY itemName;",
        {"kind": "entree"},
    )
    assert [r[0] for r in rows] == ["Margherita", "Pepperoni"]
    assert all(isinstance(v, str) for r in rows for v in r)
    assert Decimal(rows[0][1]) == Decimal("10.00")


def test_null_column_is_none(db):
    rows = db.execute_query("SELECT description FROM Items WHERE itemName = 'Garlic Bread';")
    assert rows == [[None]]


def test_update_returns_affected_rows(db):
    assert db.execute_update("UPDATE Users SET phoneNum = '999' WHERE role = 'customer';") == 2
    assert db.execute_update("UPDATE Users SET phoneNum = '999' WHERE login = 'nobody';") == 0


def test_bound_parameters_are_not_interpolated(db):
    tricky = "x'; DROP TABLE Users; --"
    assert db.execute_query("SELECT login FROM Users WHERE login = :login;", {"login": tricky}) == []
    assert db.count("SELECT COUNT(*) FROM Users;") == 4


def test_constraint_violation_raises_and_connection_survives(db):
    with pytest.raises(DatabaseError):
        db.execute_update(
            "INSERT INTO Users VALUES ('alice', 'x', 'customer', NULL, '1');"
        )
    assert db.count("SELECT COUNT(*) FROM Users WHERE login = 'alice';") == 1


def test_transaction_rolls_back_everything(db):
    with pytest.raises(DatabaseError):
        with db.transaction():
            db.execute_update("UPDATE Users SET phoneNum = 'changed' WHERE login = 'bob';")
            db.execute_update("INSERT INTO Users VALUES ('bob', 'x', 'customer', NULL, '1');")
    assert db.execute_query("SELECT phoneNum FROM Users WHERE login = 'bob';") == [["222"]]


def test_transaction_commits_on_success(db):
    with db.transaction():
        db.execute_update("UPDATE Users SET phoneNum = 'a' WHERE login = 'bob';")
        db.execute_update("UPDATE Users SET phoneNum = 'b' WHERE login = 'alice';")
    assert db.execute_query(
        "SELECT phoneNum FROM Users WHERE login IN ('alice', 'bob') ORDER BY login;"
    ) == [["b"], ["a"]]


def test_transactions_do_not_nest(db):
    with db.transaction():
        with pytest.raises(RuntimeError):
            with db.transaction():
                pass


def test_sequence_value_unavailable_is_minus_one(db):
    assert db.current_sequence_value("foodorder_orderid_seq") == -1
    # the failed lookup must not poison the connection
    assert db.count("SELECT COUNT(*) FROM Items;") == 4


def test_close_is_idempotent_and_blocks_further_use():
    manager = DatabaseManager("sqlite://")
    manager.close()
    manager.close()
    with pytest.raises(DatabaseError):
        manager.execute_query("SELECT 1;")


def test_bad_url_is_a_database_error(tmp_path):
    with pytest.raises(DatabaseError):
        DatabaseManager(f"sqlite:///{tmp_path}/missing/dir/store.db")


def test_scalar_int_reads_first_column(db):
    assert db.scalar_int("SELECT MAX(storeID) * 2 FROM Store;") == 4
    assert db.scalar_int("SELECT MAX(storeID) FROM Store WHERE storeID > 100;") == 0

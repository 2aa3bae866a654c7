from decimal import Decimal

import pytest

from pizza_store.errors import InputError


def names(items):
    return [i.name for i in items]


def test_no_filters_lists_everything(menu):
    assert sorted(names(menu.list_items())) == ["Cola", "Garlic Bread", "Margherita", "Pepperoni"]


def test_type_filter(menu):
    assert sorted(names(menu.list_items(type_filter="entree"))) == ["Margherita", "Pepperoni"]
    assert menu.list_items(type_filter="desserts") == []


def test_max_price_is_inclusive(menu):
    assert sorted(names(menu.list_items(max_price=Decimal("4.50")))) == ["Cola", "Garlic Bread"]


def test_filters_are_anded(menu):
    assert names(menu.list_items(type_filter="entree", max_price=Decimal("11"))) == ["Margherita"]


def test_sorting(menu):
    assert names(menu.list_items(ascending=True)) == ["Cola", "Garlic Bread", "Margherita", "Pepperoni"]
    assert names(menu.list_items(ascending=False)) == ["Pepperoni", "Margherita", "Garlic Bread", "Cola"]


def test_negative_max_price(menu):
    with pytest.raises(InputError):
        menu.list_items(max_price=Decimal("-1"))


def test_get_item(menu):
    item = menu.get_item("Pepperoni")
    assert item.price == Decimal("12.50")
    assert item.type_of_item == "entree"
    assert menu.get_item("pepperoni") is None


def test_stores(menu):
    stores = menu.list_stores()
    assert [s.store_id for s in stores] == [1, 2]
    assert stores[0].city == "Riverside"
    assert menu.get_store(2).review_score is None
    assert menu.get_store(99) is None

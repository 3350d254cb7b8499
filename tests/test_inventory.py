from decimal import Decimal

import pytest

from errors import NotFound, ValidationError
from inventory import InventoryLedger
from schemas import Medicine, stock_status


@pytest.mark.parametrize("stock,expected", [
    (0, "out-of-stock"),
    (1, "low-stock"),
    (50, "low-stock"),
    (51, "in-stock"),
    (1000, "in-stock"),
])
def test_stock_status_boundaries(stock, expected):
    assert stock_status(stock) == expected


def test_status_follows_stock(ledger):
    med = ledger.get("3")
    assert med.status == "out-of-stock"
    ledger.refill("3", 20)
    assert med.status == "low-stock"
    ledger.update_medicine("3", stock=75)
    assert med.status == "in-stock"
    assert med.model_dump()["status"] == "in-stock"


def test_refill_increases_stock_and_keeps_status(ledger):
    ledger.refill("1", 10)
    med = ledger.get("1")
    assert med.stock == 160
    assert med.status == "in-stock"


@pytest.mark.parametrize("qty", [0, -5, "", None, "abc"])
def test_refill_with_bad_quantity_changes_nothing(ledger, qty):
    with pytest.raises(ValidationError):
        ledger.refill("1", qty)
    assert ledger.get("1").stock == 150
    assert ledger.cart == []


def test_repeated_refills_merge_into_one_cart_entry(ledger):
    ledger.refill("2", 5)
    ledger.refill("2", 7)
    assert len(ledger.cart) == 1
    assert ledger.cart[0].medicine_id == "2"
    assert ledger.cart[0].quantity == 12
    assert ledger.get("2").stock == 37


def test_refill_unknown_medicine(ledger):
    with pytest.raises(NotFound):
        ledger.refill("missing", 5)


def test_add_medicine_derives_status(ledger):
    med = ledger.add_medicine("Amoxicillin 500", 25, "12.50")
    assert med.status == "low-stock"
    assert med.price == Decimal("12.50")
    assert med in ledger.medicines


def test_add_medicine_accepts_form_text(ledger):
    med = ledger.add_medicine("  Cetirizine ", "80", "2.25")
    assert med.name == "Cetirizine"
    assert med.stock == 80


@pytest.mark.parametrize("name,stock,price", [
    ("", 10, 1),
    ("   ", 10, 1),
    ("X", None, 1),
    ("X", "", 1),
    ("X", "ten", 1),
    ("X", 10, None),
    ("X", 10, "cheap"),
    ("X", 10, "NaN"),
    ("X", -1, 1),
    ("X", 10, -1),
])
def test_add_medicine_rejects_bad_input(ledger, name, stock, price):
    with pytest.raises(ValidationError):
        ledger.add_medicine(name, stock, price)
    assert len(ledger.medicines) == 4


def test_update_medicine_validates_before_changing(ledger):
    with pytest.raises(ValidationError):
        ledger.update_medicine("1", name="Paracetamol 650", price="oops")
    assert ledger.get("1").name == "Paracetamol"


def test_delete_leaves_cart_snapshot(ledger):
    ledger.refill("4", 10)
    ledger.delete_medicine("4")
    with pytest.raises(NotFound):
        ledger.get("4")
    item = ledger.cart[0]
    assert item.name == "Aspirin"
    assert item.price == Decimal("3.50")


def test_delete_unknown_medicine(ledger):
    with pytest.raises(NotFound):
        ledger.delete_medicine("nope")


def test_search_is_case_insensitive_and_restartable(ledger):
    results = ledger.search("AMOX")
    assert [m.name for m in results] == ["Amoxicillin"]
    assert [m.name for m in results] == ["Amoxicillin"]


def test_search_sees_later_additions(ledger):
    results = ledger.search("in")
    before = len(list(results))
    ledger.add_medicine("Insulin", 10, 30)
    assert len(list(results)) == before + 1


def test_empty_search_returns_everything(ledger):
    assert len(list(ledger.search(""))) == 4


def test_cart_quantity_updates(ledger):
    ledger.add_to_cart("1", 3)
    ledger.add_to_cart("1", 2)
    assert ledger.cart[0].quantity == 5
    ledger.set_cart_quantity("1", 9)
    assert ledger.cart[0].quantity == 9
    ledger.set_cart_quantity("1", 0)
    assert ledger.cart == []


def test_set_quantity_for_item_not_in_cart(ledger):
    with pytest.raises(NotFound):
        ledger.set_cart_quantity("1", 4)


def test_remove_and_clear_cart(ledger):
    ledger.refill("1", 1)
    ledger.refill("2", 1)
    ledger.remove_from_cart("1")
    assert [i.medicine_id for i in ledger.cart] == ["2"]
    ledger.clear_cart()
    assert ledger.cart == []


def test_price_of(ledger):
    assert ledger.price_of("paracetamol") == Decimal("5.00")
    assert ledger.price_of("Unknown") is None


def test_empty_ledger():
    ledger = InventoryLedger()
    assert ledger.medicines == []
    assert list(ledger.search("a")) == []


def test_medicine_rejects_negative_stock_assignment():
    med = Medicine(id="x", name="X", stock=1, price=Decimal("1"))
    with pytest.raises(Exception):
        med.stock = -1


@pytest.mark.parametrize("qty", [2.7, True, "two", None])
def test_set_cart_quantity_rejects_non_whole_numbers(ledger, qty):
    ledger.refill("1", 5)
    with pytest.raises(ValidationError):
        ledger.set_cart_quantity("1", qty)
    assert ledger.cart[0].quantity == 5


def test_set_cart_quantity_accepts_form_text(ledger):
    ledger.refill("1", 5)
    ledger.set_cart_quantity("1", "8")
    assert ledger.cart[0].quantity == 8
    ledger.set_cart_quantity("1", "-1")
    assert ledger.cart == []

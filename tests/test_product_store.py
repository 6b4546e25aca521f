"""Tests for the product store against a real session."""
from datetime import date

import pytest

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.product_store import (
    ProductStore,
    ConstraintViolation,
    PartialBulkFailure,
)


def make_create(**overrides):
    fields = {
        "id": "P001",
        "name": "Apple",
        "category": "Fruits",
        "price": 100.0,
        "quantity": 50,
        "expiry_date": date(2026, 3, 1),
        "discount": 10.0,
    }
    fields.update(overrides)
    return ProductCreate(**fields)


def unchecked(**overrides):
    """A record that skips schema validation, to reach database constraints."""
    fields = make_create().model_dump()
    fields.update(overrides)
    return ProductCreate.model_construct(**fields)


def test_insert_and_scan(db_session):
    store = ProductStore(db_session)

    store.insert(make_create())

    products = store.scan_all()
    assert len(products) == 1
    assert products[0].id == "P001"
    assert products[0].expiry_date == date(2026, 3, 1)


def test_insert_duplicate_raises(db_session):
    store = ProductStore(db_session)
    store.insert(make_create(name="Original"))

    with pytest.raises(ConstraintViolation):
        store.insert(make_create(name="Duplicate"))

    assert [p.name for p in store.scan_all()] == ["Original"]


def test_insert_rejected_by_database(db_session):
    store = ProductStore(db_session)

    with pytest.raises(ConstraintViolation):
        store.insert(unchecked(quantity=-1))

    assert store.count() == 0


def test_bulk_upsert_returns_count(db_session):
    store = ProductStore(db_session)

    count = store.bulk_upsert([make_create(id="A"), make_create(id="B"), make_create(id="C")])

    assert count == 3
    assert store.count() == 3


def test_bulk_upsert_replaces_existing(db_session):
    store = ProductStore(db_session)
    store.insert(make_create(name="Old", quantity=1))

    store.bulk_upsert([make_create(name="New", quantity=9)])

    product = db_session.get(Product, "P001")
    assert product.name == "New"
    assert product.quantity == 9


def test_bulk_upsert_repeated_id_last_wins(db_session):
    store = ProductStore(db_session)

    count = store.bulk_upsert([make_create(name="First"), make_create(name="Second")])

    assert count == 2
    assert [p.name for p in store.scan_all()] == ["Second"]


def test_bulk_upsert_is_atomic(db_session):
    store = ProductStore(db_session)
    store.insert(make_create(id="KEEP", name="Before"))
    batch = [
        make_create(id="KEEP", name="After"),
        make_create(id="NEW1"),
        unchecked(id="BAD", price=-5.0),
        make_create(id="NEW2"),
    ]

    with pytest.raises(PartialBulkFailure):
        store.bulk_upsert(batch)

    products = store.scan_all()
    assert [p.id for p in products] == ["KEEP"]
    assert products[0].name == "Before"


def test_partial_bulk_failure_is_constraint_violation():
    assert issubclass(PartialBulkFailure, ConstraintViolation)


def test_update_replaces_fields(db_session):
    store = ProductStore(db_session)
    store.insert(make_create())

    updated = store.update(
        "P001",
        ProductUpdate(name="Green Apple", category="Produce", price=80.0,
                      quantity=5, expiry_date=None, discount=0),
    )

    assert updated is True
    product = db_session.get(Product, "P001")
    assert product.name == "Green Apple"
    assert product.category == "Produce"
    assert product.expiry_date is None
    assert product.discount == 0


def test_update_missing_is_noop(db_session):
    store = ProductStore(db_session)
    store.insert(make_create())

    updated = store.update(
        "NOPE",
        ProductUpdate(name="X", category="Y", price=1.0, quantity=1),
    )

    assert updated is False
    assert [p.id for p in store.scan_all()] == ["P001"]
    assert store.scan_all()[0].name == "Apple"


def test_delete(db_session):
    store = ProductStore(db_session)
    store.insert(make_create())

    assert store.delete("P001") is True
    assert store.delete("P001") is False
    assert store.count() == 0


def test_scan_by_category_is_case_sensitive(db_session):
    store = ProductStore(db_session)
    store.bulk_upsert([
        make_create(id="A", category="Dairy"),
        make_create(id="B", category="dairy"),
        make_create(id="C", category="Fruits"),
    ])

    assert [p.id for p in store.scan_by_category("Dairy")] == ["A"]
    assert store.scan_by_category("Bakery") == []


def test_scan_with_expiry(db_session):
    store = ProductStore(db_session)
    store.bulk_upsert([
        make_create(id="A", expiry_date=date(2026, 5, 1)),
        make_create(id="B", expiry_date=None),
    ])

    assert [p.id for p in store.scan_with_expiry()] == ["A"]


def test_insert_quantity_too_large_for_column(db_session):
    store = ProductStore(db_session)

    with pytest.raises(ConstraintViolation):
        store.insert(unchecked(quantity=10**20))

    assert store.count() == 0


def test_bulk_upsert_quantity_too_large_rolls_back(db_session):
    store = ProductStore(db_session)

    with pytest.raises(PartialBulkFailure):
        store.bulk_upsert([make_create(id="A"), unchecked(id="B", quantity=10**20)])

    assert store.count() == 0


def test_update_quantity_too_large_keeps_row(db_session):
    store = ProductStore(db_session)
    store.insert(make_create())
    fields = make_create().model_dump(exclude={"id"})
    fields["quantity"] = 10**20

    with pytest.raises(ConstraintViolation):
        store.update("P001", ProductUpdate.model_construct(**fields))

    assert db_session.get(Product, "P001").quantity == 50

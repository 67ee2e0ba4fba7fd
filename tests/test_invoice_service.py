from __future__ import annotations

from datetime import date

import pytest

from core.cache import PageCache
from core.navigation import Redirect
from invoices import service

from .conftest import CUSTOMER_ID


@pytest.fixture
def cache() -> PageCache:
    cache = PageCache()
    cache.put("/dashboard/invoices", b"list")
    cache.put("/dashboard/invoices?page=2", b"list page 2")
    cache.put("/dashboard", b"home")
    return cache


def _valid_form(**overrides):
    form = {"customerId": CUSTOMER_ID, "amount": "12.34", "status": "pending"}
    form.update(overrides)
    return form


async def test_create_inserts_row_and_redirects(store, cache):
    with pytest.raises(Redirect) as exc_info:
        await service.create_invoice(_valid_form(), cache=cache)

    assert exc_info.value.location == "/dashboard/invoices"
    (row,) = store.rows.values()
    assert row["customer_id"] == CUSTOMER_ID
    assert row["amount"] == 1234
    assert row["status"] == "pending"
    assert row["date"] == date.today().isoformat()
    assert "/dashboard/invoices" not in cache
    assert "/dashboard/invoices?page=2" not in cache
    assert "/dashboard" in cache


async def test_create_with_zero_amount_returns_errors_without_insert(store, cache):
    state = await service.create_invoice({"customerId": "c1", "amount": "0", "status": "pending"}, cache=cache)

    assert state.errors["amount"] == ["Please enter an amount greater than $0."]
    assert state.message == "Missing Fields. Failed to Create Invoice."
    assert store.rows == {}
    assert store.calls == []
    assert "/dashboard/invoices" in cache


async def test_create_twice_creates_two_rows(store, cache):
    for _ in range(2):
        with pytest.raises(Redirect):
            await service.create_invoice(_valid_form(), cache=cache)
    assert len(store.rows) == 2


async def test_create_database_error_is_generic(store, cache):
    store.fail = True
    state = await service.create_invoice(_valid_form(), cache=cache)

    assert state.message == "Database Error: Failed to Create Invoice."
    assert state.errors == {}
    assert "/dashboard/invoices" in cache


async def test_update_keeps_date(store, cache):
    invoice_id = store.add(amount=500, status="pending")

    with pytest.raises(Redirect):
        await service.update_invoice(invoice_id, _valid_form(amount="7.5", status="paid"), cache=cache)

    row = store.rows[invoice_id]
    assert row["amount"] == 750
    assert row["status"] == "paid"
    assert row["date"] == date(2024, 1, 2)
    assert "/dashboard/invoices" not in cache


async def test_update_validation_message(store, cache):
    invoice_id = store.add()
    state = await service.update_invoice(invoice_id, _valid_form(status=""), cache=cache)

    assert state.message == "Missing Fields. Failed to Update Invoice."
    assert state.errors == {"status": ["Please select an invoice status."]}


async def test_update_database_error(store, cache):
    store.fail = True
    state = await service.update_invoice("abc", _valid_form(), cache=cache)
    assert state.message == "Database Error: Failed to Update Invoice."


async def test_delete_returns_message(store, cache):
    invoice_id = store.add()
    state = await service.delete_invoice(invoice_id, cache=cache)

    assert state.message == "Deleted Invoice."
    assert invoice_id not in store.rows
    assert "/dashboard/invoices" not in cache


async def test_delete_missing_id_is_benign(store, cache):
    state = await service.delete_invoice("3f1c4d8e-0000-4000-8000-000000000000", cache=cache)
    assert state.message == "Deleted Invoice."


async def test_delete_database_error(store, cache):
    store.fail = True
    state = await service.delete_invoice("not-a-uuid", cache=cache)

    assert state.message == "Database Error: Failed to Delete Invoice."
    assert "/dashboard/invoices" in cache


async def test_fetch_invoice_by_id_returns_dollars(store):
    invoice_id = store.add(amount=1234)
    invoice = await service.fetch_invoice_by_id(invoice_id)
    assert str(invoice["amount"]) == "12.34"


async def test_fetch_invoice_by_id_swallows_bad_ids(store):
    store.fail = True
    assert await service.fetch_invoice_by_id("bogus") is None


async def test_card_data(store):
    store.add(amount=1000, status="paid")
    store.add(amount=250, status="pending")
    cards = await service.fetch_card_data()
    assert cards == {
        "invoice_count": 2,
        "customer_count": 1,
        "total_paid": "$10.00",
        "total_pending": "$2.50",
    }


async def test_invoice_pages(store):
    for _ in range(7):
        store.add()
    assert await service.fetch_invoices_pages("") == 2


async def test_create_with_huge_amount_returns_errors(store, cache):
    state = await service.create_invoice(_valid_form(amount="1e30"), cache=cache)

    assert state.errors == {"amount": ["Please enter an amount greater than $0."]}
    assert state.message == "Missing Fields. Failed to Create Invoice."
    assert store.calls == []


async def test_update_with_huge_amount_returns_errors(store, cache):
    invoice_id = store.add()
    state = await service.update_invoice(invoice_id, _valid_form(amount="99999999999999999999999999999"), cache=cache)

    assert state.message == "Missing Fields. Failed to Update Invoice."
    assert store.rows[invoice_id]["amount"] == 1234

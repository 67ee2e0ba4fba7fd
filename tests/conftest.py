"""
Shared fixtures: in-memory stand-ins for the SQL repositories and a test app.
"""

from __future__ import annotations

import uuid
from datetime import date

import bcrypt
import pytest
from fastapi.testclient import TestClient

from auth import security
from auth.providers import CredentialsProvider
from auth.service import AuthService
from core import db
from core.cache import PageCache
from core.settings import AuthSettings
from invoices import repository as invoice_repository

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"
USER_EMAIL = "user@nextmail.com"
USER_PASSWORD = "123456"


class FakeInvoiceStore:
    """Dict-backed replacement for `invoices.repository`."""

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.customers = [{"id": CUSTOMER_ID, "name": "Delba de Oliveira", "email": "delba@oliveira.com"}]
        self.fail = False
        self.calls: list[str] = []

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise db.DatabaseError("boom")

    def add(self, *, amount: int = 1234, status: str = "pending") -> str:
        invoice_id = str(uuid.uuid4())
        self.rows[invoice_id] = {
            "id": invoice_id,
            "customer_id": CUSTOMER_ID,
            "amount": amount,
            "status": status,
            "date": date(2024, 1, 2),
        }
        return invoice_id

    async def insert_invoice(self, *, customer_id, amount_in_cents, status, date):
        self._check("insert_invoice")
        invoice_id = str(uuid.uuid4())
        self.rows[invoice_id] = {
            "id": invoice_id,
            "customer_id": customer_id,
            "amount": amount_in_cents,
            "status": status,
            "date": date,
        }

    async def update_invoice(self, invoice_id, *, customer_id, amount_in_cents, status):
        self._check("update_invoice")
        row = self.rows.get(invoice_id)
        if row is None:
            return 0
        row.update(customer_id=customer_id, amount=amount_in_cents, status=status)
        return 1

    async def delete_invoice(self, invoice_id):
        self._check("delete_invoice")
        return 1 if self.rows.pop(invoice_id, None) is not None else 0

    async def get_invoice_by_id(self, invoice_id):
        self._check("get_invoice_by_id")
        row = self.rows.get(invoice_id)
        return dict(row) if row is not None else None

    async def list_customers(self):
        return list(self.customers)

    async def list_filtered_invoices(self, query, *, limit, offset):
        self._check("list_filtered_invoices")
        customer = self.customers[0]
        rows = [
            {**row, "name": customer["name"], "email": customer["email"], "image_url": ""}
            for row in self.rows.values()
        ]
        return rows[offset : offset + limit]

    async def count_filtered_invoices(self, query):
        return len(self.rows)

    async def invoice_totals(self):
        return {
            "invoice_count": len(self.rows),
            "customer_count": len(self.customers),
            "paid": sum(r["amount"] for r in self.rows.values() if r["status"] == "paid"),
            "pending": sum(r["amount"] for r in self.rows.values() if r["status"] == "pending"),
        }


@pytest.fixture
def store(monkeypatch) -> FakeInvoiceStore:
    fake = FakeInvoiceStore()
    for name in (
        "insert_invoice",
        "update_invoice",
        "delete_invoice",
        "get_invoice_by_id",
        "list_customers",
        "list_filtered_invoices",
        "count_filtered_invoices",
        "invoice_totals",
    ):
        monkeypatch.setattr(invoice_repository, name, getattr(fake, name))
    return fake


@pytest.fixture(scope="session")
def user_row() -> dict:
    # Low cost factor keeps the suite fast; checkpw reads the cost from the hash.
    hashed = bcrypt.hashpw(USER_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
    return {"id": "410544b2-4001-4271-9855-fec4b6a6442a", "name": "User", "email": USER_EMAIL, "password": hashed}


class UserDirectory:
    def __init__(self, users: list[dict]) -> None:
        self.users = {u["email"]: u for u in users}
        self.lookups: list[str] = []
        self.fail = False

    async def get_user(self, email: str) -> dict | None:
        self.lookups.append(email)
        if self.fail:
            raise db.DatabaseError("connection refused")
        return self.users.get(email)


@pytest.fixture
def users(user_row) -> UserDirectory:
    return UserDirectory([user_row])


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(secret="test-secret")


@pytest.fixture
def auth_service(auth_settings, users) -> AuthService:
    return AuthService(auth_settings, [CredentialsProvider(get_user=users.get_user)])


@pytest.fixture
def page_cache() -> PageCache:
    return PageCache()


@pytest.fixture
def app(monkeypatch, auth_service, page_cache):
    monkeypatch.setenv("PPR_MODE", "incremental")
    from main import create_app

    return create_app(auth_service=auth_service, page_cache=page_cache)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def signed_in_client(app, auth_settings, user_row) -> TestClient:
    client = TestClient(app, follow_redirects=False)
    token = security.build_session_token(auth_settings, user_id=user_row["id"], email=user_row["email"])
    client.cookies.set(auth_settings.cookie_name, token)
    return client

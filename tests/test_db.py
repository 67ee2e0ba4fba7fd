from __future__ import annotations

import pytest

from core import db


def test_sanitize_strips_sslmode():
    url = "postgres://u:p@h:5432/d?sslmode=require&application_name=x"
    assert db._sanitize_database_url(url) == "postgres://u:p@h:5432/d?application_name=x"


def test_database_url_falls_back_to_postgres_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_URL", "postgres://h/d")
    assert db.database_url() == "postgres://h/d"


def test_database_url_missing(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    with pytest.raises(RuntimeError):
        db.database_url()


@pytest.mark.parametrize("status, rows", [("DELETE 1", 1), ("DELETE 0", 0), ("INSERT 0 1", 1), ("CREATE TABLE", 0)])
def test_affected_rows(status, rows):
    assert db._affected_rows(status) == rows


async def test_queries_without_pool_raise_database_error():
    with pytest.raises(db.DatabaseError):
        await db.execute("SELECT 1")

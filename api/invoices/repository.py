"""
Invoice persistence (raw SQL).

Amounts are stored in cents. Every value goes through a positional parameter.
"""

from __future__ import annotations

from datetime import date as date_type

from core import db

ITEMS_PER_PAGE = 6


async def insert_invoice(*, customer_id: str, amount_in_cents: int, status: str, date: str) -> None:
    await db.execute(
        """
        INSERT INTO invoices (customer_id, amount, status, date)
        VALUES ($1, $2, $3, $4)
        """,
        customer_id,
        amount_in_cents,
        status,
        date_type.fromisoformat(date),
    )


async def update_invoice(invoice_id: str, *, customer_id: str, amount_in_cents: int, status: str) -> int:
    return await db.execute(
        """
        UPDATE invoices
        SET customer_id = $2, amount = $3, status = $4
        WHERE id = $1::uuid
        """,
        invoice_id,
        customer_id,
        amount_in_cents,
        status,
    )


async def delete_invoice(invoice_id: str) -> int:
    return await db.execute(
        """
        DELETE FROM invoices
        WHERE id = $1::uuid
        """,
        invoice_id,
    )


async def get_invoice_by_id(invoice_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id::text AS id, customer_id::text AS customer_id, amount, status, date
        FROM invoices
        WHERE id = $1::uuid
        """,
        invoice_id,
    )


async def list_customers() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id::text AS id, name
        FROM customers
        ORDER BY name ASC
        """
    )


async def list_filtered_invoices(query: str, *, limit: int, offset: int) -> list[dict]:
    """
    Search customer name/email and invoice amount/date/status.
    """
    return await db.fetch_all(
        """
        SELECT
          invoices.id::text AS id,
          invoices.amount,
          invoices.date,
          invoices.status,
          customers.name,
          customers.email,
          customers.image_url
        FROM invoices
        JOIN customers ON invoices.customer_id = customers.id
        WHERE
          customers.name ILIKE $1
          OR customers.email ILIKE $1
          OR invoices.amount::text ILIKE $1
          OR invoices.date::text ILIKE $1
          OR invoices.status ILIKE $1
        ORDER BY invoices.date DESC
        LIMIT $2 OFFSET $3
        """,
        f"%{query}%",
        limit,
        offset,
    )


async def count_filtered_invoices(query: str) -> int:
    count = await db.fetch_value(
        """
        SELECT COUNT(*)
        FROM invoices
        JOIN customers ON invoices.customer_id = customers.id
        WHERE
          customers.name ILIKE $1
          OR customers.email ILIKE $1
          OR invoices.amount::text ILIKE $1
          OR invoices.date::text ILIKE $1
          OR invoices.status ILIKE $1
        """,
        f"%{query}%",
    )
    return int(count or 0)


async def invoice_totals() -> dict:
    row = await db.fetch_one(
        """
        SELECT
          COUNT(*) AS invoice_count,
          COALESCE(SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END), 0) AS paid,
          COALESCE(SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END), 0) AS pending,
          (SELECT COUNT(*) FROM customers) AS customer_count
        FROM invoices
        """
    )
    if row is None:
        raise db.DatabaseError("Failed to read invoice totals.")
    return row

"""
Invoice form actions and dashboard reads.

Actions:
- create/update: validate -> persist -> revalidate list page -> redirect
- delete: persist -> revalidate list page -> message (no redirect)

Validation and database failures come back as `ActionState`; they never
raise to the router. The only exception a successful create/update raises is
the `Redirect` navigation signal.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from core import db
from core.cache import PageCache
from core.navigation import redirect

from . import repository, schemas

INVOICES_PATH = "/dashboard/invoices"

logger = logging.getLogger(__name__)


async def create_invoice(form: Mapping[str, Any], *, cache: PageCache) -> schemas.ActionState:
    validated = schemas.validate_invoice_form(form)
    if not validated.success:
        return schemas.ActionState(
            errors=validated.errors,
            message="Missing Fields. Failed to Create Invoice.",
        )

    data = validated.data
    try:
        await repository.insert_invoice(
            customer_id=data.customer_id,
            amount_in_cents=data.amount_in_cents,
            status=data.status,
            date=schemas.today_iso(),
        )
    except db.DatabaseError:
        logger.exception("invoice_create_failed customer_id=%s", data.customer_id)
        return schemas.ActionState(message="Database Error: Failed to Create Invoice.")

    logger.info("invoice_created customer_id=%s amount=%s", data.customer_id, data.amount_in_cents)
    cache.revalidate_path(INVOICES_PATH)
    redirect(INVOICES_PATH)


async def update_invoice(invoice_id: str, form: Mapping[str, Any], *, cache: PageCache) -> schemas.ActionState:
    validated = schemas.validate_invoice_form(form)
    if not validated.success:
        return schemas.ActionState(
            errors=validated.errors,
            message="Missing Fields. Failed to Update Invoice.",
        )

    data = validated.data
    try:
        await repository.update_invoice(
            invoice_id,
            customer_id=data.customer_id,
            amount_in_cents=data.amount_in_cents,
            status=data.status,
        )
    except db.DatabaseError:
        logger.exception("invoice_update_failed invoice_id=%s", invoice_id)
        return schemas.ActionState(message="Database Error: Failed to Update Invoice.")

    logger.info("invoice_updated invoice_id=%s", invoice_id)
    cache.revalidate_path(INVOICES_PATH)
    redirect(INVOICES_PATH)


async def delete_invoice(invoice_id: str, *, cache: PageCache) -> schemas.ActionState:
    try:
        deleted = await repository.delete_invoice(invoice_id)
    except db.DatabaseError:
        logger.exception("invoice_delete_failed invoice_id=%s", invoice_id)
        return schemas.ActionState(message="Database Error: Failed to Delete Invoice.")

    # Deleting an id that is already gone is a no-op, not a failure.
    logger.info("invoice_deleted invoice_id=%s rows=%s", invoice_id, deleted)
    cache.revalidate_path(INVOICES_PATH)
    return schemas.ActionState(message="Deleted Invoice.")


async def fetch_customers() -> list[dict]:
    return await repository.list_customers()


async def fetch_invoice_by_id(invoice_id: str) -> dict | None:
    """
    Invoice row with `amount` converted back to dollars for the edit form.
    """
    try:
        row = await repository.get_invoice_by_id(invoice_id)
    except db.DatabaseError:
        # Malformed ids fail the uuid cast; treat them like a missing row.
        logger.warning("invoice_lookup_failed invoice_id=%s", invoice_id)
        return None
    if row is None:
        return None
    return {**row, "amount": schemas.cents_to_amount(row["amount"])}


async def fetch_filtered_invoices(query: str = "", *, page: int = 1) -> list[dict]:
    page = max(page, 1)
    rows = await repository.list_filtered_invoices(
        (query or "").strip(),
        limit=repository.ITEMS_PER_PAGE,
        offset=(page - 1) * repository.ITEMS_PER_PAGE,
    )
    return [{**row, "amount_display": schemas.format_currency(row["amount"])} for row in rows]


async def fetch_invoices_pages(query: str = "") -> int:
    count = await repository.count_filtered_invoices((query or "").strip())
    return max(1, math.ceil(count / repository.ITEMS_PER_PAGE))


async def fetch_card_data() -> dict:
    totals = await repository.invoice_totals()
    return {
        "invoice_count": int(totals["invoice_count"]),
        "customer_count": int(totals["customer_count"]),
        "total_paid": schemas.format_currency(totals["paid"]),
        "total_pending": schemas.format_currency(totals["pending"]),
    }

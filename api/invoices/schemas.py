"""
Invoice form schemas and action results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.validation import ValidationResult, validate_form

CENT = Decimal("0.01")
# invoices.amount is a Postgres INT holding cents.
MAX_CENTS = 2_147_483_647

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}


class InvoiceForm(BaseModel):
    """
    Fields accepted by both create and update.

    `id` and `date` are never read from the form.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: Decimal = Field(..., gt=0)
    status: Literal["pending", "paid"]

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        # Missing or blank inputs coerce to 0, which then fails the > 0 check.
        if value is None:
            return Decimal(0)
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return Decimal(0)
            try:
                return Decimal(value)
            except InvalidOperation:
                return value
        return value

    @field_validator("amount")
    @classmethod
    def _whole_cents(cls, value: Decimal) -> Decimal:
        try:
            rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError("amount is out of range") from exc
        if rounded <= 0:
            raise ValueError("amount rounds to zero cents")
        if amount_to_cents(rounded) > MAX_CENTS:
            raise ValueError("amount is out of range")
        return rounded

    @property
    def amount_in_cents(self) -> int:
        return amount_to_cents(self.amount)


def amount_to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def cents_to_amount(cents: int) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(CENT)


def format_currency(cents: int) -> str:
    return f"${cents_to_amount(cents):,.2f}"


def today_iso() -> str:
    return date.today().isoformat()


def validate_invoice_form(raw: Mapping[str, Any]) -> ValidationResult[InvoiceForm]:
    return validate_form(
        InvoiceForm,
        raw,
        fields=("customerId", "amount", "status"),
        messages=FIELD_MESSAGES,
    )


@dataclass
class ActionState:
    """
    What a form action hands back to the page when it does not redirect.
    """

    errors: dict[str, list[str]] = field(default_factory=dict)
    message: str | None = None

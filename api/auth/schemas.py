"""
Auth form schemas.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from core.validation import ValidationResult, validate_form

# Same shape check browsers apply to <input type="email">.
_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)


class CredentialsForm(BaseModel):
    email: str = Field(..., max_length=320)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_RE.match(value):
            raise ValueError("Invalid email address.")
        return value


def validate_credentials(raw: Mapping[str, Any]) -> ValidationResult[CredentialsForm]:
    return validate_form(CredentialsForm, raw, fields=("email", "password"))

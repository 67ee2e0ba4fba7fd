"""
Non-raising form validation on top of pydantic.

`validate_form()` always returns a `ValidationResult`: either the parsed model
or a `{field: [message, ...]}` mapping. Field messages come from the caller so
that every failure on a field reads the same to the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    success: bool
    data: ModelT | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)


def _field_name(error: Mapping[str, Any]) -> str:
    loc = error.get("loc") or ()
    return str(loc[0]) if loc else "__root__"


def flatten_errors(
    exc: ValidationError,
    *,
    messages: Mapping[str, str] | None = None,
) -> dict[str, list[str]]:
    """
    Group pydantic errors by top-level field, one message per field.
    """
    messages = messages or {}
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        name = _field_name(error)
        message = messages.get(name) or str(error.get("msg") or "Invalid value.")
        bucket = errors.setdefault(name, [])
        if message not in bucket:
            bucket.append(message)
    return errors


def validate_form(
    model: type[ModelT],
    raw: Mapping[str, Any],
    *,
    fields: tuple[str, ...],
    messages: Mapping[str, str] | None = None,
) -> ValidationResult[ModelT]:
    # Only the named fields are read; anything else in the submission is ignored.
    payload = {name: raw.get(name) for name in fields}
    try:
        data = model.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(success=False, errors=flatten_errors(exc, messages=messages))
    return ValidationResult(success=True, data=data)

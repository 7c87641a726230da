"""Request payload validation for the movies API.

Payloads are checked against ``MovieCreate`` / ``MovieUpdate`` and only the
recognized fields are kept. Once a payload passes, ``budget`` goes through
:func:`coerce_budget`, which never fails: anything that is not a usable
amount is stored as zero.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Type

from pydantic import ValidationError
from sqlmodel import SQLModel

from .errors import MovieValidationError
from .models.movies import MovieCreate, MovieUpdate

ZERO_BUDGET = Decimal("0.00")
_CENTS = Decimal("0.01")
# DECIMAL(15, 2) holds at most 13 integer digits
_BUDGET_LIMIT = Decimal("1E13")
_REQUEST_PARTS = {"body", "path", "query"}


def describe_errors(errors: list) -> str:
    """Turn the first pydantic error into a ``"field: message"`` string."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in _REQUEST_PARTS)
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def coerce_budget(value: Any) -> Decimal:
    if isinstance(value, str):
        text = value.strip() or "0"
    else:
        text = str(value)

    if "_" in text:
        return ZERO_BUDGET
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return ZERO_BUDGET

    if not amount.is_finite() or amount <= 0 or amount >= _BUDGET_LIMIT:
        return ZERO_BUDGET
    amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return amount if amount < _BUDGET_LIMIT else ZERO_BUDGET


def _validate(schema: Type[SQLModel], payload: Any, exclude_unset: bool) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise MovieValidationError("Request body must be a JSON object")
    try:
        model = schema.model_validate(payload)
    except ValidationError as e:
        raise MovieValidationError(describe_errors(e.errors())) from e

    values = model.model_dump(exclude_unset=exclude_unset)
    if "budget" in values:
        values["budget"] = coerce_budget(values["budget"])
    return values


def validate_create(payload: Any) -> Dict[str, Any]:
    """Validate a full movie payload. Every field is required."""
    return _validate(MovieCreate, payload, exclude_unset=False)


def validate_update(payload: Any) -> Dict[str, Any]:
    """Validate a partial movie payload holding at least one known field."""
    return _validate(MovieUpdate, payload, exclude_unset=True)

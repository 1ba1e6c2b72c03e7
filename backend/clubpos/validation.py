from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Maximum price per gram/unit: 99,999.99 (9,999,999 cents)
MAX_PRICE_CENTS = 9_999_999

# Largest value a 64-bit INTEGER column holds; wallet amounts and balances stay below it
MAX_STORABLE_CENTS = 2 ** 63 - 1

QUANTITY_STEP = Decimal("0.001")
CENT = Decimal("1")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate document number)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Parse a user-supplied number into a finite Decimal.

    Accepts int, float, Decimal and numeric strings ("12", "4.5", " 3 ").
    Rejects booleans, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number")
    try:
        dec = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not dec.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return dec


def _quantize(value: Decimal, step: Decimal, field: str) -> Decimal:
    try:
        return value.quantize(step, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Too many digits for the decimal context
        raise ValidationError(f"{field} is out of range")


def parse_quantity(value: Any, field: str = "quantity") -> Decimal:
    """Quantity in grams or units, rounded to the milligram."""
    return _quantize(to_decimal(value, field), QUANTITY_STEP, field)


def amount_to_cents(value: Any, field: str = "amount") -> int:
    """Currency amount ("12.50", 12.5, 12) to integer cents, half-up."""
    return int(_quantize(to_decimal(value, field) * 100, CENT, field))


def line_subtotal_cents(quantity: Decimal, unit_price_cents: int) -> int:
    """quantity x unit price, rounded half-up to the cent."""
    return int((Decimal(quantity) * unit_price_cents).quantize(CENT, rounding=ROUND_HALF_UP))


def to_int(value: Any, field: str) -> int:
    """Strict integer from JSON: ints and plain digit strings only."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return to_int(value, col.key)

    if isinstance(coltype, Numeric):
        return parse_quantity(value, col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{col.key} must be a boolean")

    if isinstance(coltype, (String, Text)):
        if not isinstance(value, str):
            raise ValidationError(f"{col.key} must be a string")
        value = value.strip()
        max_len = getattr(coltype, "length", None)
        if max_len is not None and len(value) > max_len:
            raise ValidationError(f"{col.key} must be at most {max_len} characters")
        return value

    return value


def validate_payload(
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    *,
    partial: bool,
) -> dict:
    """
    Validate and coerce a JSON payload against a model's columns.

    - Unknown or non-writable fields are rejected.
    - On create (partial=False) every required field must be present and non-empty.
    - Non-nullable columns refuse None.
    """
    if not isinstance(payload, dict):
        raise ValidationError("JSON body must be an object")

    cols = _columns_by_key(model)

    unknown = set(payload) - policy.writable_fields
    if unknown:
        raise ValidationError(f"Unknown or read-only fields: {', '.join(sorted(unknown))}")

    if not partial:
        missing = [
            f for f in sorted(policy.required_on_create or set())
            if payload.get(f) is None or (isinstance(payload.get(f), str) and not payload.get(f).strip())
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned = {}
    for key, value in payload.items():
        col = cols[key]
        if value is None and not col.nullable:
            raise ValidationError(f"{key} cannot be null")
        cleaned[key] = _coerce_value(col, value)
    return cleaned


def enforce_rules_product(data: dict) -> None:
    """Business rules on product fields after coercion."""
    from .models import ProductCategory, StrainType

    if "name" in data and not data["name"]:
        raise ValidationError("name cannot be empty")

    if "category" in data:
        try:
            data["category"] = ProductCategory(str(data["category"]).upper()).value
        except ValueError:
            allowed = ", ".join(c.value for c in ProductCategory)
            raise ValidationError(f"category must be one of: {allowed}")

    if data.get("strain_type") is not None:
        try:
            data["strain_type"] = StrainType(str(data["strain_type"]).upper()).value
        except ValueError:
            allowed = ", ".join(s.value for s in StrainType)
            raise ValidationError(f"strain_type must be one of: {allowed}")

    if "price_cents" in data:
        price = data["price_cents"]
        if price < 0:
            raise ValidationError("price_cents cannot be negative")
        if price > MAX_PRICE_CENTS:
            raise ValidationError(f"price_cents cannot exceed {MAX_PRICE_CENTS}")

    if "stock_quantity" in data and data["stock_quantity"] < 0:
        raise ValidationError("stock_quantity cannot be negative")

    for field in ("thc_percent", "cbd_percent"):
        value = data.get(field)
        if value is not None and not (0 <= value <= 100):
            raise ValidationError(f"{field} must be between 0 and 100")


def enforce_rules_member(data: dict) -> None:
    """Business rules on member registration fields after coercion."""
    from .models import DocumentType

    if "full_name" in data and not data["full_name"]:
        raise ValidationError("full_name cannot be empty")

    if "doc_number" in data:
        if not data["doc_number"]:
            raise ValidationError("doc_number cannot be empty")
        data["doc_number"] = data["doc_number"].upper()

    if "doc_type" in data:
        try:
            data["doc_type"] = DocumentType(str(data["doc_type"]).upper()).value
        except ValueError:
            allowed = ", ".join(d.value for d in DocumentType)
            raise ValidationError(f"doc_type must be one of: {allowed}")

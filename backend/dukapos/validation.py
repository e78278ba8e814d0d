from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError, ConflictError  # noqa: F401  (re-exported)


# Maximum money value: 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_MONEY_CENTS = 999_999_999

# Upper bound for counts (stock levels, sale quantities); fits a 32-bit INTEGER
MAX_QUANTITY = 2_147_483_647

PRODUCT_TYPES = ("product", "service")
PAYMENT_METHODS = ("cash", "card", "mobile_money", "bank_transfer")

EXPENSE_CATEGORIES = [
    "Office Supplies",
    "Marketing",
    "Travel",
    "Utilities",
    "Equipment",
    "Software",
    "Professional Services",
    "Insurance",
    "Rent",
    "Food & Beverages",
    "Maintenance",
    "Other",
]


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    - money_fields: JSON key -> cents column (e.g. "price" -> "price_cents")
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore
    money_fields: dict[str, str] | None = None


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def parse_money_cents(value: Any, field: str = "amount") -> int:
    """
    Parse a client money value ("30.00", "30", 30, 30.5) into integer cents.

    At most two fractional digits; never negative; capped at MAX_MONEY_CENTS.
    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a decimal amount")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a decimal amount")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal amount")
    if amount.as_tuple().exponent < -2:
        raise ValidationError(f"{field} cannot have more than 2 decimal places")
    if amount < 0:
        raise ValidationError(f"{field} must be >= 0")
    cents = int(amount * 100)
    if cents > MAX_MONEY_CENTS:
        raise ValidationError(f"{field} cannot exceed {format_cents(MAX_MONEY_CENTS)}")
    return cents


def format_cents(cents: int | None) -> str | None:
    """Integer cents -> fixed two-decimal string ("3000" -> "30.00")."""
    if cents is None:
        return None
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(int(cents)), 100)
    return f"{sign}{whole}.{frac:02d}"


def _bounded_int(col, value: int) -> int:
    if abs(value) > MAX_QUANTITY:
        raise ValidationError(f"{col.key} cannot exceed {MAX_QUANTITY}")
    return value


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return _bounded_int(col, value)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{col.key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)")
            try:
                parsed = int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
            return _bounded_int(col, parsed)
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal")
        raise ValidationError(f"{col.key} must be an integer")

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
            return value.strip().lower() == "true"
        raise ValidationError(f"{col.key} must be a boolean")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column name.

    Money fields arrive under their JSON name ("price") and leave under
    their column name ("price_cents").

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    money_fields = policy.money_fields or {}
    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if payload.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols and k not in money_fields:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        if k in money_fields:
            col_key = money_fields[k]
            if raw is None:
                if not cols[col_key].nullable:
                    raise ValidationError(f"{k} cannot be null")
                patch[col_key] = None
            else:
                patch[col_key] = parse_money_cents(raw, k)
            continue

        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Optional text sent as "" is stored as NULL
        if isinstance(col.type, (String, Text)) and col.nullable and val == "":
            val = None

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "type" in patch and patch["type"] not in PRODUCT_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(PRODUCT_TYPES)}")
    for field in ("stock_quantity", "min_stock_level"):
        if field in patch and patch[field] is not None and patch[field] < 0:
            raise ValidationError(f"{field} must be >= 0")


def enforce_rules_expense(patch: dict) -> None:
    if "amount_cents" in patch and patch["amount_cents"] == 0:
        raise ValidationError("amount must be > 0")


def require_payment_method(value: Any) -> str:
    if not isinstance(value, str) or value not in PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
    return value


def require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        else:
            raise ValidationError(f"{field} must be a positive integer")
    if value <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    if value > MAX_QUANTITY:
        raise ValidationError(f"{field} cannot exceed {MAX_QUANTITY}")
    return value

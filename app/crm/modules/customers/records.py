"""
Customer record shape and its two hand-written mappings:

- JSON object  <->  Customer   (camelCase keys on the wire)
- Customer     <->  CustomerRow (snake_case columns in the `customers` table)

Parsing is lenient (scalar coercion, unknown keys ignored) and only
rejects bodies that cannot be read as a customer at all.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields, replace
from typing import Any

from app.crm.constants import BIGINT_MAX, BIGINT_MIN
from app.crm.errors import BadRequest
from app.crm.modules.customers.models import CustomerRow


@dataclass
class Customer:
    customer_id: int | None = None
    customer_name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    purchase_value: float | None = None
    order_id: int | None = None


# attribute -> JSON key, in wire order
JSON_KEYS: dict[str, str] = {
    "customer_id": "customerId",
    "customer_name": "customerName",
    "address": "address",
    "phone": "phone",
    "email": "email",
    "purchase_value": "purchaseValue",
    "order_id": "orderId",
}

# Everything a PUT overwrites.
MUTABLE_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Customer) if f.name != "customer_id")

TEXT_FIELDS = ("customer_name", "address", "phone", "email")

_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_customer_id(raw: str) -> int:
    """Path parameter -> id. Non-integers and out-of-range values are a 400."""
    value = (raw or "").strip()
    if not _INT_RE.fullmatch(value):
        raise BadRequest(f"Invalid customer id: {raw!r}")
    n = int(value)
    if not BIGINT_MIN <= n <= BIGINT_MAX:
        raise BadRequest(f"Customer id out of range: {raw!r}")
    return n


def _coerce_text(key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise BadRequest(f"{key} must be a string")


def _coerce_float(key: str, value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise BadRequest(f"{key} must be a number")
    if isinstance(value, (int, float)):
        try:
            out = float(value)
        except OverflowError:
            raise BadRequest(f"{key} out of range") from None
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            raise BadRequest(f"{key} must be a number") from None
    else:
        raise BadRequest(f"{key} must be a number")
    if not math.isfinite(out):
        raise BadRequest(f"{key} must be a finite number")
    return out


def _coerce_bigint(key: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise BadRequest(f"{key} must be an integer")
    if isinstance(value, int):
        out = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise BadRequest(f"{key} must be an integer")
        out = int(value)
    elif isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        out = int(value.strip())
    else:
        raise BadRequest(f"{key} must be an integer")
    if not BIGINT_MIN <= out <= BIGINT_MAX:
        raise BadRequest(f"{key} out of range")
    return out


def customer_from_json(payload: Any) -> Customer:
    """
    Request body -> Customer. Any customerId in the body is ignored: ids come
    from the store (POST) or the path (PUT). Missing keys become None.
    """
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")

    values: dict[str, Any] = {}
    for attr in TEXT_FIELDS:
        key = JSON_KEYS[attr]
        values[attr] = _coerce_text(key, payload.get(key))
    values["purchase_value"] = _coerce_float("purchaseValue", payload.get("purchaseValue"))
    values["order_id"] = _coerce_bigint("orderId", payload.get("orderId"))
    return Customer(**values)


def customer_to_json(c: Customer) -> dict[str, Any]:
    return {key: getattr(c, attr) for attr, key in JSON_KEYS.items()}


def copy_mutable_fields(target: Customer, source: Customer) -> Customer:
    """Full replacement of every mutable attribute; the target's id is kept."""
    return replace(target, **{attr: getattr(source, attr) for attr in MUTABLE_FIELDS})


def row_to_record(row: CustomerRow) -> Customer:
    return Customer(
        customer_id=row.customer_id,
        customer_name=row.customer_name,
        address=row.address,
        phone=row.phone,
        email=row.email,
        purchase_value=row.purchase_value,
        order_id=row.order_id,
    )


def record_to_columns(c: Customer) -> dict[str, Any]:
    """Column values for INSERT/UPDATE. The key is never written from a record."""
    return {
        "customer_name": c.customer_name,
        "address": c.address,
        "phone": c.phone,
        "email": c.email,
        "purchase_value": c.purchase_value,
        "order_id": c.order_id,
    }

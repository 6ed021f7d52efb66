"""
OpenAPI 3.0 document for the customer resource, generated from the explicit
route table (`CUSTOMER_ROUTES`) and the record field table (`JSON_KEYS`).
"""

from __future__ import annotations

import copy
import re
from typing import Any

from app.crm.modules.customers.api import CUSTOMER_ROUTES
from app.crm.modules.customers.records import JSON_KEYS

_PATH_PARAM_RE = re.compile(r"<(?:[^:<>]+:)?([^<>]+)>")

_FIELD_SCHEMAS: dict[str, dict[str, Any]] = {
    "customer_id": {"type": "integer", "format": "int64", "readOnly": True},
    "customer_name": {"type": "string", "nullable": True},
    "address": {"type": "string", "nullable": True},
    "phone": {"type": "string", "nullable": True},
    "email": {"type": "string", "nullable": True},
    "purchase_value": {"type": "number", "format": "double", "nullable": True},
    "order_id": {"type": "integer", "format": "int64", "nullable": True},
}

_EXAMPLE = {
    "customerName": "John Doe",
    "address": "NYC",
    "phone": "9876543210",
    "email": "john@example.com",
    "purchaseValue": 500.75,
    "orderId": 101,
}

_CUSTOMER_REF = {"$ref": "#/components/schemas/Customer"}
_ERROR_REF = {"$ref": "#/components/schemas/Error"}

_OPERATIONS: dict[str, dict[str, Any]] = {
    "create_customer": {
        "summary": "Create a customer",
        "requestBody": True,
        "responses": {
            "200": {"description": "Stored customer with its assigned id", "content": {"application/json": {"schema": _CUSTOMER_REF}}},
            "400": {"description": "Malformed body"},
        },
    },
    "list_customers": {
        "summary": "List all customers",
        "responses": {
            "200": {
                "description": "Every stored customer (order unspecified)",
                "content": {"application/json": {"schema": {"type": "array", "items": _CUSTOMER_REF}}},
            },
        },
    },
    "get_customer": {
        "summary": "Fetch a customer by id",
        "responses": {
            "200": {
                "description": "The customer, or null when no customer has this id",
                "content": {"application/json": {"schema": {**_CUSTOMER_REF, "nullable": True}}},
            },
            "400": {"description": "Non-integer id"},
        },
    },
    "update_customer": {
        "summary": "Replace every field of an existing customer",
        "description": "Fields omitted from the body are cleared to null. customerId in the body is ignored.",
        "requestBody": True,
        "responses": {
            "200": {"description": "Updated customer", "content": {"application/json": {"schema": _CUSTOMER_REF}}},
            "400": {"description": "Non-integer id or malformed body"},
            "404": {"description": "No customer with this id (only when UPDATE_MISSING_AS_404 is set)"},
            "500": {"description": "No customer with this id"},
        },
    },
    "delete_customer": {
        "summary": "Delete a customer",
        "description": "Deleting an id that does not exist still succeeds.",
        "responses": {
            "200": {"description": "Confirmation message", "content": {"text/plain": {"schema": {"type": "string"}}}},
            "400": {"description": "Non-integer id"},
        },
    },
}


def _openapi_path(rule: str) -> tuple[str, list[str]]:
    params = _PATH_PARAM_RE.findall(rule)
    return _PATH_PARAM_RE.sub(r"{\1}", rule), params


def customer_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {key: _FIELD_SCHEMAS[attr] for attr, key in JSON_KEYS.items()},
        "example": {"customerId": 1, **_EXAMPLE},
    }


def build_openapi(*, title: str, version: str) -> dict[str, Any]:
    paths: dict[str, dict[str, Any]] = {}
    for rule, method, endpoint in CUSTOMER_ROUTES:
        path, params = _openapi_path(rule)
        op_def = copy.deepcopy(_OPERATIONS[endpoint])
        op: dict[str, Any] = {
            "operationId": endpoint,
            "tags": ["customers"],
            "summary": op_def["summary"],
            "responses": op_def["responses"],
        }
        if "description" in op_def:
            op["description"] = op_def["description"]
        if params:
            op["parameters"] = [
                {"name": p, "in": "path", "required": True, "schema": {"type": "integer", "format": "int64"}}
                for p in params
            ]
        if op_def.get("requestBody"):
            op["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": _CUSTOMER_REF, "example": _EXAMPLE}},
            }
        for code, resp in op["responses"].items():
            if code != "200" and "content" not in resp:
                resp["content"] = {"application/json": {"schema": _ERROR_REF}}
        paths.setdefault(path, {})[method.lower()] = op

    return {
        "openapi": "3.0.3",
        "info": {"title": title, "version": version},
        "paths": paths,
        "components": {
            "schemas": {
                "Customer": customer_schema(),
                "Error": {
                    "type": "object",
                    "properties": {
                        "timestamp": {"type": "string", "format": "date-time"},
                        "status": {"type": "integer"},
                        "error": {"type": "string"},
                        "path": {"type": "string"},
                    },
                },
            },
        },
    }

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from app.crm.errors import BadRequest
from app.crm.metrics import record_customer_operation
from app.crm.modules.customers.records import (
    customer_from_json,
    customer_to_json,
    parse_customer_id,
)
from app.crm.modules.customers.service import CustomerService

# (rule, method, endpoint) -- the whole HTTP surface of the resource.
# The OpenAPI document is generated from this table too.
CUSTOMER_ROUTES: tuple[tuple[str, str, str], ...] = (
    ("/customers", "POST", "create_customer"),
    ("/customers", "GET", "list_customers"),
    ("/customers/<customer_id>", "GET", "get_customer"),
    ("/customers/<customer_id>", "PUT", "update_customer"),
    ("/customers/<customer_id>", "DELETE", "delete_customer"),
)


def _json_body():
    # silent=True: unparsable JSON or a wrong content type both come back as None.
    payload = request.get_json(silent=True)
    if payload is None:
        raise BadRequest("Request body must be JSON")
    return payload


class CustomerResource:
    """
    HTTP handlers for /customers. Stateless; every request goes through the
    single CustomerService it was built with.
    """

    def __init__(self, service: CustomerService) -> None:
        self.service = service

    def create_customer(self):
        record = customer_from_json(_json_body())
        saved = self.service.save(record)
        record_customer_operation("create")
        return jsonify(customer_to_json(saved))

    def list_customers(self):
        record_customer_operation("list")
        return jsonify([customer_to_json(c) for c in self.service.get_all()])

    def get_customer(self, customer_id: str):
        cid = parse_customer_id(customer_id)
        found = self.service.get_by_id(cid)
        record_customer_operation("get")
        # Absent is a 200 with a JSON null body, not a 404.
        return jsonify(customer_to_json(found) if found is not None else None)

    def update_customer(self, customer_id: str):
        cid = parse_customer_id(customer_id)
        changes = customer_from_json(_json_body())
        updated = self.service.update_by_id(cid, changes)
        record_customer_operation("update")
        return jsonify(customer_to_json(updated))

    def delete_customer(self, customer_id: str):
        cid = parse_customer_id(customer_id)
        self.service.delete_by_id(cid)
        record_customer_operation("delete")
        return Response(f"Customer deleted with ID: {cid}", mimetype="text/plain")


def build_blueprint(resource: CustomerResource) -> Blueprint:
    bp = Blueprint("customers", __name__)
    for rule, method, endpoint in CUSTOMER_ROUTES:
        bp.add_url_rule(rule, endpoint=endpoint, view_func=getattr(resource, endpoint), methods=[method])
    return bp

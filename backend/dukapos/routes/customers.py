# Overview: Flask API routes for customers; parses input and returns JSON responses.

"""
Customer routes.

MULTI-TENANT: scoped to the caller's business; foreign ids answer 404.
"""

from flask import Blueprint, request, g, jsonify

from ..errors import DomainError, error_response
from ..models import Customer
from ..permissions import MANAGE_CUSTOMERS
from ..services import customers_service
from ..services.tenant_service import get_scoped
from ..validation import ModelValidationPolicy, validate_payload
from ..decorators import require_auth, require_permission, require_business

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone_number", "address"},
    required_on_create={"name"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
@require_business
def list_customers_route():
    return customers_service.list_customers(
        g.business_id,
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )


@customers_bp.get("/<customer_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
@require_business
def get_customer_route(customer_id: str):
    try:
        customer = get_scoped(Customer, customer_id, g.business_id)
    except DomainError as e:
        return error_response(e)
    return customer.to_dict()


@customers_bp.post("")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
@require_business
def create_customer_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
        customer = customers_service.create_customer(patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return jsonify(customer.to_dict()), 201


@customers_bp.put("/<customer_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
@require_business
def update_customer_route(customer_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
        customer = customers_service.update_customer(customer_id=customer_id, patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return customer.to_dict()


@customers_bp.delete("/<customer_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
@require_business
def delete_customer_route(customer_id: str):
    try:
        customers_service.delete_customer(customer_id=customer_id, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return {"ok": True}, 200

# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/dukapos/routes/products.py
"""
Product management routes with multi-tenant support.

MULTI-TENANT: All product operations are scoped to the caller's business
(g.business_id, set by @require_business). A product id belonging to
another business answers 404 exactly like a missing one.

Money: "price" is sent and returned as a decimal string ("10.00").
"""
from flask import Blueprint, request, g, jsonify

from ..errors import DomainError, error_response
from ..models import Product
from ..permissions import MANAGE_PRODUCTS
from ..services import products_service
from ..services.tenant_service import get_scoped
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
)
from ..decorators import require_auth, require_permission, require_business

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "description",
        "type",
        "price",
        "stock_quantity",
        "min_stock_level",
        "category_id",
        "is_active",
    },
    required_on_create={"name", "price"},
    money_fields={"price": "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def list_products():
    """
    List the business's products, newest first.

    Query params:
    - include_inactive: bool (default false) - include deactivated products
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    return products_service.list_products(
        g.business_id,
        include_inactive=include_inactive,
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )


@products_bp.get("/low-stock")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def low_stock_route():
    """Active products whose stock is at or below their minimum level."""
    products = products_service.low_stock_products(g.business_id)
    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/<product_id>")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def get_product_route(product_id: str):
    try:
        product = get_scoped(Product, product_id, g.business_id)
    except DomainError as e:
        return error_response(e)
    return product.to_dict()


@products_bp.post("")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)

    return jsonify(created.to_dict()), 201


@products_bp.put("/<product_id>")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def update_product_route(product_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)

    return updated.to_dict()


@products_bp.delete("/<product_id>")
@require_auth
@require_permission(MANAGE_PRODUCTS)
@require_business
def delete_product_route(product_id: str):
    """
    Delete a product; products already sold are deactivated instead.
    """
    try:
        result = products_service.delete_product(product_id=product_id, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)

    return result, 200

# Overview: Flask API routes for product categories; parses input and returns JSON responses.

from flask import Blueprint, request, g, jsonify

from ..errors import DomainError, error_response
from ..models import Category
from ..permissions import MANAGE_CATEGORIES
from ..services import categories_service
from ..validation import ModelValidationPolicy, validate_payload
from ..decorators import require_auth, require_permission, require_business

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
@require_auth
@require_permission(MANAGE_CATEGORIES)
@require_business
def list_categories_route():
    return categories_service.list_categories(g.business_id)


@categories_bp.post("")
@require_auth
@require_permission(MANAGE_CATEGORIES)
@require_business
def create_category_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
        category = categories_service.create_category(patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return jsonify(category.to_dict()), 201

# Overview: Flask API routes for the caller's business; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g

from ..errors import DomainError, error_response
from ..services import business_service
from ..decorators import require_auth

business_bp = Blueprint("business", __name__, url_prefix="/api/business")


@business_bp.get("")
@require_auth
def get_business_route():
    try:
        business = business_service.get_business(g.current_user)
    except DomainError as e:
        return error_response(e)
    return jsonify(business.to_dict())


@business_bp.post("")
@require_auth
def create_business_route():
    """Create the caller's business (one per account)."""
    try:
        business = business_service.create_business(g.current_user, request.get_json(silent=True))
    except DomainError as e:
        return error_response(e)
    return jsonify(business.to_dict()), 201


@business_bp.put("")
@require_auth
def update_business_route():
    try:
        business = business_service.update_business(g.current_user, request.get_json(silent=True))
    except DomainError as e:
        return error_response(e)
    return jsonify(business.to_dict())

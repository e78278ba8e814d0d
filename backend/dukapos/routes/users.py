# Overview: Flask API routes for user provisioning; parses input and returns JSON responses.

"""
User management routes.

The actor's role is always taken from the session user. Each service call
checks the (role, action) table and the provisioning rules before writing:
- SUPER_ADMIN: create APP_STAFF/SPONSOR, list/view/status/delete anyone
- APP_STAFF: create MERCHANT, list/view/status MERCHANT accounts only
- everyone else: 403
"""

from flask import Blueprint, request, jsonify, g

from ..errors import DomainError, ValidationError, error_response
from ..permissions import Role
from ..services import user_service
from ..decorators import require_auth

users_bp = Blueprint("users", __name__, url_prefix="/api/users")
merchants_bp = Blueprint("merchants", __name__, url_prefix="/api/merchants")


@users_bp.get("")
@require_auth
def list_users_route():
    """
    List users.

    Query params:
    - role: SUPER_ADMIN | APP_STAFF | SPONSOR | MERCHANT | STAFF (optional)
    """
    try:
        users = user_service.list_users(g.current_user, request.args.get("role") or None)
    except DomainError as e:
        return error_response(e)

    result = [u.to_dict() for u in users]
    return jsonify({"users": result, "count": len(result)})


@users_bp.post("")
@require_auth
def create_user_route():
    """
    Provision a user.

    Body: full_name, phone_number, password, role, and optionally email,
    business_name (creates the merchant's business), status,
    profile_image_url.
    """
    payload = request.get_json(silent=True)
    try:
        user = user_service.create_user(g.current_user, payload)
    except DomainError as e:
        return error_response(e)

    return jsonify(user.to_dict()), 201


@users_bp.get("/<user_id>")
@require_auth
def get_user_route(user_id: str):
    try:
        user = user_service.get_user(g.current_user, user_id)
    except DomainError as e:
        return error_response(e)
    return jsonify(user.to_dict())


@users_bp.patch("/<user_id>/status")
@require_auth
def update_user_status_route(user_id: str):
    """Body: {"status": "active" | "inactive" | "suspended"}"""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return error_response(ValidationError("Invalid JSON payload"))
    try:
        user = user_service.set_user_status(g.current_user, user_id, payload.get("status"))
    except DomainError as e:
        return error_response(e)
    return jsonify(user.to_dict())


@users_bp.delete("/<user_id>")
@require_auth
def delete_user_route(user_id: str):
    try:
        user_service.delete_user(g.current_user, user_id)
    except DomainError as e:
        return error_response(e)
    return jsonify({"ok": True}), 200


@merchants_bp.put("/<user_id>/status")
@require_auth
def update_merchant_status_route(user_id: str):
    """Status change restricted to MERCHANT accounts (APP Staff dashboard)."""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return error_response(ValidationError("Invalid JSON payload"))
    try:
        user = user_service.set_user_status(
            g.current_user, user_id, payload.get("status"), expected_role=Role.MERCHANT
        )
    except DomainError as e:
        return error_response(e)
    return jsonify(user.to_dict())

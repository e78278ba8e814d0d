# Overview: Flask API routes for expenses; parses input and returns JSON responses.

from flask import Blueprint, request, g, jsonify

from ..errors import DomainError, error_response
from ..models import Expense
from ..permissions import MANAGE_EXPENSES
from ..services import expenses_service
from ..services.tenant_service import get_scoped
from ..validation import (
    EXPENSE_CATEGORIES,
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_expense,
)
from ..decorators import require_auth, require_permission, require_business

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"description", "amount", "category"},
    required_on_create={"description", "amount", "category"},
    money_fields={"amount": "amount_cents"},
)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("/categories")
@require_auth
def expense_categories_route():
    """Suggested expense categories. Any non-blank category is accepted."""
    return {"categories": EXPENSE_CATEGORIES}


@expenses_bp.get("")
@require_auth
@require_permission(MANAGE_EXPENSES)
@require_business
def list_expenses_route():
    return expenses_service.list_expenses(
        g.business_id,
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )


@expenses_bp.get("/<expense_id>")
@require_auth
@require_permission(MANAGE_EXPENSES)
@require_business
def get_expense_route(expense_id: str):
    try:
        expense = get_scoped(Expense, expense_id, g.business_id)
    except DomainError as e:
        return error_response(e)
    return expense.to_dict()


@expenses_bp.post("")
@require_auth
@require_permission(MANAGE_EXPENSES)
@require_business
def create_expense_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
        enforce_rules_expense(patch)
        expense = expenses_service.create_expense(
            patch=patch,
            business_id=g.business_id,
            recorded_by_id=g.current_user.id,
        )
    except DomainError as e:
        return error_response(e)
    return jsonify(expense.to_dict()), 201


@expenses_bp.put("/<expense_id>")
@require_auth
@require_permission(MANAGE_EXPENSES)
@require_business
def update_expense_route(expense_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=True)
        enforce_rules_expense(patch)
        expense = expenses_service.update_expense(expense_id=expense_id, patch=patch, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return expense.to_dict()


@expenses_bp.delete("/<expense_id>")
@require_auth
@require_permission(MANAGE_EXPENSES)
@require_business
def delete_expense_route(expense_id: str):
    try:
        expenses_service.delete_expense(expense_id=expense_id, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return {"ok": True}, 200

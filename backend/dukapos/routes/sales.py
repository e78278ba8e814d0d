# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

"""
Sale routes.

POST /api/sales records a sale atomically: prices and totals are computed
from the database, stock is decremented in the same transaction, and any
failure leaves no trace. A client-sent total_amount (or item unit_price /
total_price) must match the server's numbers or the sale is rejected.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..errors import DomainError, error_response, internal_error_response
from ..permissions import CREATE_SALE, VIEW_SALES
from ..services import sales_service
from ..decorators import require_auth, require_permission, require_business

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
@require_auth
@require_permission(CREATE_SALE)
@require_business
def create_sale_route():
    """
    Body:
        {"payment_method": "cash" | "card" | "mobile_money" | "bank_transfer",
         "customer_id": "..." (optional),
         "items": [{"product_id": "...", "quantity": 3}],
         "total_amount": "30.00" (optional, verified)}
    """
    try:
        sale_request = sales_service.parse_sale_request(request.get_json(silent=True))
        sale = sales_service.create_sale(
            business_id=g.business_id,
            seller_id=g.current_user.id,
            request=sale_request,
        )
        current_app.logger.info("Sale %s recorded for business %s", sale.id, g.business_id)
        return jsonify(sale.to_dict()), 201
    except DomainError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return internal_error_response()


@sales_bp.get("")
@require_auth
@require_permission(VIEW_SALES)
@require_business
def list_sales_route():
    """Sales newest first with customer and items (each with its product)."""
    return sales_service.list_sales(
        g.business_id,
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )


@sales_bp.get("/<sale_id>")
@require_auth
@require_permission(VIEW_SALES)
@require_business
def get_sale_route(sale_id: str):
    try:
        sale = sales_service.get_sale(sale_id=sale_id, business_id=g.business_id)
    except DomainError as e:
        return error_response(e)
    return sale.to_dict()

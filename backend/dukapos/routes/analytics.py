# Overview: Flask API routes for analytics; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..errors import ValidationError, error_response
from ..permissions import VIEW_BUSINESS_ANALYTICS, VIEW_PLATFORM_GROWTH
from ..services import reporting_service
from ..time_utils import parse_iso_date
from ..decorators import require_auth, require_permission, require_business

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api")


@analytics_bp.get("/dashboard/stats")
@require_auth
@require_permission(VIEW_BUSINESS_ANALYTICS)
@require_business
def dashboard_stats_route():
    """Today's sales, transactions, new customers, and units sold."""
    return reporting_service.dashboard_stats(g.business_id)


@analytics_bp.get("/analytics/weekly-sales")
@require_auth
@require_permission(VIEW_BUSINESS_ANALYTICS)
@require_business
def weekly_sales_route():
    """
    Query params:
    - start: YYYY-MM-DD (optional; default six days ago, so the window ends today)
    """
    try:
        start = parse_iso_date(request.args.get("start"))
    except ValueError:
        return error_response(ValidationError("start must be a date (YYYY-MM-DD)"))

    days = reporting_service.weekly_sales(g.business_id, start)
    return {"items": days, "count": len(days)}


@analytics_bp.get("/analytics/monthly-growth")
@require_auth
@require_permission(VIEW_PLATFORM_GROWTH)
def monthly_growth_route():
    """Platform-wide month-to-date vs previous month sales growth (percent)."""
    return {"monthly_growth": reporting_service.monthly_growth()}

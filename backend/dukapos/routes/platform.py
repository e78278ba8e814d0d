# Overview: Flask API routes for the APP Staff and Super Admin dashboards.

"""
Cross-business views.

- /api/app-staff/*: merchant oversight (APP_STAFF and SUPER_ADMIN)
- /api/super-admin/*: platform overview (SUPER_ADMIN only)

Gated by the action table; other roles get 403.
"""

from flask import Blueprint, jsonify, request

from ..permissions import Role, VIEW_MERCHANT_OVERVIEW, VIEW_PLATFORM_OVERVIEW
from ..services import reporting_service
from ..decorators import require_auth, require_permission

platform_bp = Blueprint("platform", __name__, url_prefix="/api")


def _limit() -> int:
    limit = request.args.get("limit", default=20, type=int)
    return max(1, min(limit, 100))


@platform_bp.get("/app-staff/stats")
@require_auth
@require_permission(VIEW_MERCHANT_OVERVIEW)
def app_staff_stats_route():
    return reporting_service.app_staff_stats()


@platform_bp.get("/app-staff/merchants")
@require_auth
@require_permission(VIEW_MERCHANT_OVERVIEW)
def app_staff_merchants_route():
    merchants = reporting_service.list_merchants()
    return jsonify({"merchants": merchants, "count": len(merchants)})


@platform_bp.get("/app-staff/activities")
@require_auth
@require_permission(VIEW_MERCHANT_OVERVIEW)
def app_staff_activities_route():
    activities = reporting_service.recent_activities(target_roles={Role.MERCHANT.value}, limit=_limit())
    return jsonify({"activities": activities, "count": len(activities)})


@platform_bp.get("/super-admin/stats")
@require_auth
@require_permission(VIEW_PLATFORM_OVERVIEW)
def super_admin_stats_route():
    return reporting_service.super_admin_stats()


@platform_bp.get("/super-admin/activities")
@require_auth
@require_permission(VIEW_PLATFORM_OVERVIEW)
def super_admin_activities_route():
    activities = reporting_service.recent_activities(limit=_limit())
    return jsonify({"activities": activities, "count": len(activities)})

# backend/dukapos/routes/system.py
"""
System health endpoint.

Public (no session): reports database reachability and whether the
bootstrap super admin exists.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import User, SessionToken
from ..permissions import Role
from ..time_utils import now

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        user_count = db.session.query(User).count()
        super_admins = db.session.query(User).filter_by(role=Role.SUPER_ADMIN.value).count()
        active_sessions = db.session.query(SessionToken).filter(SessionToken.expires_at > now()).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy" if super_admins else "degraded",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "users": user_count,
                "super_admin_present": super_admins > 0,
                "active_sessions": active_sessions,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: healthy or degraded (no super admin yet)
    - 503: database unreachable
    """
    database_health = check_database_health()
    http_status = 503 if database_health["status"] == "unhealthy" else 200

    return {
        "status": database_health["status"],
        "timestamp": now().replace(microsecond=0).isoformat(),
        "checks": {"database": database_health},
    }, http_status

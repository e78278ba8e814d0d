# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/dukapos/routes/auth.py
"""
Authentication API routes

SECURITY FEATURES:
- bcrypt password verification
- Server-side sessions; the token is set as an http-only cookie
- 7-day sliding expiry, renewed by every authenticated request
- Failed and successful logins recorded in security_events
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..errors import AuthenticationError, DomainError, ValidationError, error_response, internal_error_response
from ..permissions import role_permissions
from ..services import auth_service
from ..services import session_service
from ..services import permission_service
from ..services.tenant_service import business_owned_by
from ..decorators import require_auth, request_token


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _set_session_cookie(response, token: str):
    config = current_app.config
    response.set_cookie(
        config["SESSION_COOKIE_NAME"],
        token,
        max_age=int(session_service.session_ttl().total_seconds()),
        httponly=True,
        secure=config.get("SESSION_COOKIE_SECURE", False),
        samesite="Lax",
        path="/",
    )
    return response


@auth_bp.post("/login")
def login_route():
    """
    Authenticate by phone number and password and start a session.

    Body: {"phone_number": "...", "password": "..."}

    Returns the user and the session token; the token is also set as an
    http-only cookie.
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return error_response(ValidationError("Invalid JSON payload"))
        phone_number = data.get("phone_number")
        password = data.get("password")

        if not isinstance(phone_number, str) or not phone_number.strip() or not isinstance(password, str) or not password:
            return error_response(ValidationError("Phone number and password are required"))

        try:
            user = auth_service.authenticate(phone_number, password)
        except AuthenticationError as e:
            permission_service.log_security_event(
                user_id=None,
                event_type="LOGIN_FAILED",
                success=False,
                action="LOGIN",
                reason=f"{e.error_code} for {phone_number.strip()}",
            )
            return error_response(e)

        token, expires_at = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )
        permission_service.log_security_event(
            user_id=user.id,
            event_type="LOGIN_SUCCESS",
            success=True,
            action="LOGIN",
        )
        current_app.logger.info("User %s logged in", user.id)

        response = jsonify({
            "user": user.to_dict(),
            "token": token,
            "expires_at": expires_at.replace(microsecond=0).isoformat(),
            "message": "Login successful",
        })
        return _set_session_cookie(response, token), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return internal_error_response()


@auth_bp.post("/logout")
def logout_route():
    """
    Destroy the current session and clear the cookie.

    Succeeds even when the session is already gone.
    """
    try:
        token = request_token()
        record = session_service.get_store().get(token) if token else None
        if token and session_service.destroy_session(token):
            permission_service.log_security_event(
                user_id=record.user_id if record else None,
                event_type="LOGOUT",
                success=True,
                action="LOGOUT",
            )

        response = jsonify({"message": "Logout successful"})
        response.delete_cookie(current_app.config["SESSION_COOKIE_NAME"], path="/")
        return response, 200

    except Exception:
        current_app.logger.exception("Failed to logout user")
        return internal_error_response()


@auth_bp.get("/user")
@require_auth
def current_user_route():
    """
    Current identity with the actions the role allows and the owned business.
    """
    try:
        user = g.current_user
        business = business_owned_by(user.id)
        payload = user.to_dict()
        payload["permissions"] = sorted(role_permissions(user.role))
        payload["business"] = business.to_dict() if business else None
        return jsonify(payload), 200
    except DomainError as e:
        return error_response(e)

# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import current_app, request, jsonify, g

from .errors import AuthorizationError, BusinessNotFound, error_response
from .services import session_service, permission_service
from .services.tenant_service import business_owned_by


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user')


def request_token() -> str | None:
    """Session token from the http-only cookie, or a Bearer header."""
    token = request.cookies.get(current_app.config["SESSION_COOKIE_NAME"])
    if token:
        return token
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def require_auth(f):
    """
    Require a valid session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object (role re-read from the DB)
    - g.session_context: The full SessionContext object

    SECURITY: Returns 401 if:
    - No session cookie or Authorization header
    - Unknown or expired token
    - User account no longer active
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = request_token()
        if not token:
            return jsonify({"error": "AuthenticationError", "message": "Authentication required"}), 401

        context = session_service.validate_session(token)
        if not context:
            return jsonify({"error": "AuthenticationError", "message": "Invalid or expired session"}), 401

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_permission(action: str):
    """
    Require the session user's role to allow an action.

    Denials are logged to security_events and returned as 403.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "AuthenticationError", "message": "Authentication required"}), 401

            try:
                permission_service.require_action(g.current_user, action)
            except AuthorizationError as e:
                return error_response(e)

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_business(f):
    """
    Resolve the caller's business into g.business.

    MULTI-TENANT: every business-scoped route runs behind this; the business
    is the one the session user owns. Returns 404 BusinessNotFound otherwise.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _is_authenticated():
            return jsonify({"error": "AuthenticationError", "message": "Authentication required"}), 401

        business = business_owned_by(g.current_user.id)
        if not business:
            return error_response(BusinessNotFound())

        g.business = business
        g.business_id = business.id

        return f(*args, **kwargs)

    return decorated_function

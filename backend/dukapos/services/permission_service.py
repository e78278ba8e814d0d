# Overview: Service-layer operations for authorization checks and the security audit trail.

"""
Authorization Checks and Security Event Logging

WHY: Enforce role-based access control and create an audit trail.
Denials and account-lifecycle events are written to security_events.

DESIGN PRINCIPLES:
- Fail closed: unknown roles and unknown actions are denied
- The actor's role always comes from the session user, never the request
- Log denials only: routine grants are not logged
"""

from flask import has_request_context, request

from ..extensions import db
from ..errors import AuthorizationError
from ..models import SecurityEvent
from ..permissions import authorize, Decision
from ..time_utils import now


class PermissionDeniedError(AuthorizationError):
    """Raised when the actor's role does not allow the action."""
    pass


def log_security_event(
    user_id: str | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    target_user_id: str | None = None,
    target_role: str | None = None,
    business_id: str | None = None,
    commit: bool = True,
) -> SecurityEvent:
    """
    Append an event to the audit trail.

    Request metadata (path, IP, user agent) is filled in when called inside a
    request. Pass commit=False to join the caller's unit of work.

    event_type examples:
    - LOGIN_SUCCESS / LOGIN_FAILED
    - LOGOUT
    - PERMISSION_DENIED
    - CROSS_BUSINESS_ACCESS_DENIED
    - USER_CREATED / USER_STATUS_CHANGED / USER_DELETED
    - BUSINESS_CREATED
    """
    ip_address = None
    user_agent = None
    if has_request_context():
        resource = resource or request.path
        ip_address = request.remote_addr
        user_agent = request.headers.get("User-Agent")

    event = SecurityEvent(
        user_id=user_id,
        target_user_id=target_user_id,
        target_role=target_role,
        business_id=business_id,
        event_type=event_type,
        resource=resource,
        action=action,
        success=success,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
        occurred_at=now(),
    )

    db.session.add(event)
    if commit:
        db.session.commit()

    return event


def check(actor, action: str, target_role=None) -> Decision:
    """authorize() for a User row."""
    return authorize(actor.role, action, target_role)


def require_action(actor, action: str, target_role=None) -> None:
    """
    Require the actor to be allowed to perform the action.

    Raises PermissionDeniedError (403) and logs the denial otherwise.
    """
    decision = check(actor, action, target_role)
    if decision.allowed:
        return

    log_security_event(
        user_id=actor.id,
        event_type="PERMISSION_DENIED",
        success=False,
        action=action,
        reason=decision.reason,
        target_role=getattr(target_role, "value", target_role),
    )
    raise PermissionDeniedError(decision.reason or "Permission denied")

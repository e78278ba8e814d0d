# Overview: Business-scoping helpers shared by every business-owned resource service.

"""
Multi-Tenant Service: Business Resolution and Scoping Helpers

WHY: Centralize tenant validation so every operational service scopes the
same way. A caller's business is the business they own; every read and every
mutation of an operational row is filtered by that business id.

SECURITY INVARIANTS:
1. The business is resolved from the session user, never from client input
2. Lookups by id always include business_id; a row owned by another
   business is indistinguishable from a missing row (404)
3. Cross-business access attempts are logged as security events

USAGE:
    from dukapos.services.tenant_service import require_business, get_scoped

    business = require_business(g.current_user.id)
    product = get_scoped(Product, product_id, business.id, label="Product")
"""

from flask import g, has_request_context

from ..extensions import db
from ..errors import BusinessNotFound, NotFoundError
from ..models import Business
from .permission_service import log_security_event


def business_owned_by(user_id: str) -> Business | None:
    return db.session.query(Business).filter_by(owner_id=user_id).first()


def require_business(user_id: str) -> Business:
    """
    Resolve the caller's business.

    Raises BusinessNotFound (404) when the user owns no business. Operational
    features are unavailable until one exists.
    """
    business = business_owned_by(user_id)
    if not business:
        raise BusinessNotFound()
    return business


def get_scoped(model, entity_id: str, business_id: str, *, label: str | None = None, query=None):
    """
    Fetch one business-owned row by id, or raise NotFoundError.

    A row that exists under another business raises the same NotFoundError
    and is logged as a cross-business access attempt.
    """
    label = label or model.__name__
    base = query if query is not None else db.session.query(model)
    row = base.filter(model.id == entity_id, model.business_id == business_id).first()
    if row is not None:
        return row

    foreign = db.session.query(model.business_id).filter(model.id == entity_id).first()
    if foreign is not None:
        _log_cross_business_attempt(
            f"{label} {entity_id} belongs to business {foreign[0]}, not {business_id}",
            business_id=business_id,
        )
    raise NotFoundError(f"{label} not found")


def _log_cross_business_attempt(reason: str, business_id: str | None = None) -> None:
    user_id = None
    if has_request_context() and hasattr(g, "current_user"):
        user_id = g.current_user.id

    log_security_event(
        user_id=user_id,
        event_type="CROSS_BUSINESS_ACCESS_DENIED",
        success=False,
        reason=reason,
        business_id=business_id,
    )

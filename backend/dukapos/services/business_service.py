# Overview: Service-layer operations for the caller's own business record.

from __future__ import annotations

from ..extensions import db
from ..errors import ConflictError
from ..models import Business, User
from ..permissions import MANAGE_BUSINESS
from ..validation import ModelValidationPolicy, validate_payload
from .permission_service import log_security_event, require_action
from .tenant_service import business_owned_by, require_business


BUSINESS_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "address", "phone_number", "email"},
    required_on_create={"name"},
)


def get_business(user: User) -> Business:
    return require_business(user.id)


def create_business(user: User, payload: dict) -> Business:
    """
    Create the caller's business. A user owns at most one.

    Raises ConflictError if the caller already has a business.
    """
    require_action(user, MANAGE_BUSINESS)
    patch = validate_payload(model=Business, payload=payload, policy=BUSINESS_POLICY, partial=False)

    if business_owned_by(user.id):
        raise ConflictError("Business already exists for this account")

    business = Business(**patch, owner_id=user.id)
    db.session.add(business)
    db.session.flush()

    log_security_event(
        user_id=user.id,
        event_type="BUSINESS_CREATED",
        success=True,
        action=MANAGE_BUSINESS,
        business_id=business.id,
        reason=f"Created business {business.name}",
        commit=False,
    )
    db.session.commit()
    return business


def update_business(user: User, payload: dict) -> Business:
    require_action(user, MANAGE_BUSINESS)
    business = require_business(user.id)
    patch = validate_payload(model=Business, payload=payload, policy=BUSINESS_POLICY, partial=True)

    for key, value in patch.items():
        setattr(business, key, value)

    db.session.commit()
    return business

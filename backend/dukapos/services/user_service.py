# Overview: Service-layer operations for user provisioning, status control, and deletion.

"""
User Provisioning Service

WHY: Accounts are created top-down only. SUPER_ADMIN provisions APP_STAFF and
SPONSOR accounts, APP_STAFF provisions MERCHANT accounts, nobody registers
themselves. Every mutation checks the session actor's role against the
action table before touching the database; a denial has no partial effect.

Provisioning a MERCHANT with a business_name also creates that merchant's
Business in the same commit.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import (
    Business,
    Category,
    Customer,
    Expense,
    Product,
    Sale,
    SaleItem,
    User,
)
from ..permissions import (
    Role,
    UserStatus,
    LIST_USERS,
    CREATE_USER,
    VIEW_USER,
    UPDATE_USER_STATUS,
    DELETE_USER,
    managed_roles_for,
)
from ..validation import ModelValidationPolicy, validate_payload
from .auth_service import hash_password
from .concurrency import atomic
from .permission_service import log_security_event, require_action
from .session_service import destroy_all_user_sessions
from .tenant_service import business_owned_by


USER_POLICY = ModelValidationPolicy(
    writable_fields={
        "full_name",
        "phone_number",
        "email",
        "business_name",
        "profile_image_url",
        "status",
    },
    required_on_create={"full_name", "phone_number"},
)


def _parse_role(value) -> Role:
    role = Role.parse(value)
    if role is None:
        raise ValidationError(
            f"role must be one of: {', '.join(r.value for r in Role)}"
        )
    return role


def _parse_status(value) -> UserStatus:
    status = UserStatus.parse(value)
    if status is None:
        raise ValidationError(
            f"status must be one of: {', '.join(s.value for s in UserStatus)}"
        )
    return status


def _get_user_or_404(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(actor: User, role: str | None = None) -> list[User]:
    """
    List accounts the actor may see, newest first.

    SUPER_ADMIN sees everyone; APP_STAFF sees MERCHANT accounts only, and an
    explicit role filter outside that scope is denied.
    """
    target = _parse_role(role) if role else None
    require_action(actor, LIST_USERS, target)

    query = db.session.query(User)
    if target is not None:
        query = query.filter(User.role == target.value)
    else:
        managed = managed_roles_for(actor.role)
        if managed is not None:
            query = query.filter(User.role.in_([r.value for r in managed]))

    return query.order_by(User.created_at.desc()).all()


def get_user(actor: User, user_id: str) -> User:
    user = _get_user_or_404(user_id)
    if user.id != actor.id:
        require_action(actor, VIEW_USER, user.role)
    return user


def create_user(actor: User, payload: dict) -> User:
    """
    Provision an account of the requested role.

    Raises:
        ValidationError: missing/invalid fields or weak password
        PermissionDeniedError: actor may not create that role
        ConflictError: phone number or email already registered
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    data = dict(payload)
    role = _parse_role(data.pop("role", None))
    password = data.pop("password", None)

    require_action(actor, CREATE_USER, role)

    patch = validate_payload(model=User, payload=data, policy=USER_POLICY, partial=False)
    user = provision_user(patch=patch, role=role, password=password, created_by_id=actor.id)

    current_app.logger.info("User %s created %s account %s", actor.id, role.value, user.id)
    return user


def provision_user(*, patch: dict, role: Role, password: str, created_by_id: str | None) -> User:
    """
    Insert a validated account (and a merchant's business) without any
    role check. Callers authorize first; the CLI uses it as the operator.
    """
    if "status" in patch:
        patch["status"] = _parse_status(patch["status"]).value
    password_hash = hash_password(password)

    if db.session.query(User.id).filter_by(phone_number=patch["phone_number"]).first():
        raise ConflictError("Phone number already registered")
    if patch.get("email") and db.session.query(User.id).filter_by(email=patch["email"]).first():
        raise ConflictError("Email already registered")

    user = User(
        **patch,
        role=role.value,
        password_hash=password_hash,
        created_by_id=created_by_id,
    )
    db.session.add(user)

    try:
        db.session.flush()

        business = None
        if role == Role.MERCHANT and user.business_name:
            business = Business(
                name=user.business_name,
                owner_id=user.id,
                phone_number=user.phone_number,
                email=user.email,
            )
            db.session.add(business)
            db.session.flush()

        log_security_event(
            user_id=created_by_id,
            event_type="USER_CREATED",
            success=True,
            action=CREATE_USER,
            target_user_id=user.id,
            target_role=role.value,
            business_id=business.id if business else None,
            reason=f"Created {role.value} {user.full_name}",
            commit=False,
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Phone number or email already registered")

    return user


def set_user_status(actor: User, user_id: str, status, *, expected_role: Role | None = None) -> User:
    """
    Set an account's status.

    expected_role restricts the target (the merchant endpoint only touches
    MERCHANT accounts); any other account is reported as not found.

    Setting the current value again is a successful no-op. Leaving "active"
    destroys all of the user's sessions immediately.
    """
    new_status = _parse_status(status)
    require_action(actor, UPDATE_USER_STATUS)
    user = _get_user_or_404(user_id)
    if expected_role is not None and user.role != expected_role.value:
        raise NotFoundError(f"{expected_role.value.title()} not found")

    require_action(actor, UPDATE_USER_STATUS, user.role)

    if user.id == actor.id:
        raise ValidationError("Cannot change your own status")

    if user.status == new_status.value:
        return user

    previous = user.status
    user.status = new_status.value
    if new_status != UserStatus.ACTIVE:
        destroy_all_user_sessions(user.id, commit=False)

    log_security_event(
        user_id=actor.id,
        event_type="USER_STATUS_CHANGED",
        success=True,
        action=UPDATE_USER_STATUS,
        target_user_id=user.id,
        target_role=user.role,
        reason=f"{user.full_name}: {previous} -> {new_status.value}",
        commit=False,
    )
    db.session.commit()
    return user


def _purge_business(business_id: str) -> None:
    sale_ids = select(Sale.id).where(Sale.business_id == business_id)
    db.session.query(SaleItem).filter(SaleItem.sale_id.in_(sale_ids)).delete(synchronize_session="fetch")
    for model in (Sale, Expense, Product, Category, Customer):
        db.session.query(model).filter(model.business_id == business_id).delete()
    db.session.query(Business).filter(Business.id == business_id).delete()


def delete_user(actor: User, user_id: str) -> None:
    """
    Permanently delete an account (SUPER_ADMIN only).

    In one transaction: purges the business the user owns with all of its
    operational rows, detaches the user from rows in other businesses
    (created_by, sold_by, recorded_by), and destroys their sessions.
    """
    require_action(actor, DELETE_USER)

    if user_id == actor.id:
        raise ValidationError("Cannot delete your own account")

    user = _get_user_or_404(user_id)
    role = user.role
    full_name = user.full_name

    with atomic():
        business = business_owned_by(user.id)
        if business:
            _purge_business(business.id)

        db.session.query(User).filter(User.created_by_id == user.id).update(
            {User.created_by_id: None}
        )
        db.session.query(Sale).filter(Sale.sold_by_id == user.id).update(
            {Sale.sold_by_id: None}
        )
        db.session.query(Expense).filter(Expense.recorded_by_id == user.id).update(
            {Expense.recorded_by_id: None}
        )
        destroy_all_user_sessions(user.id, commit=False)
        db.session.query(User).filter(User.id == user.id).delete()

        log_security_event(
            user_id=actor.id,
            event_type="USER_DELETED",
            success=True,
            action=DELETE_USER,
            target_user_id=user_id,
            target_role=role,
            reason=f"Deleted {role} {full_name}",
            commit=False,
        )

    current_app.logger.info("User %s deleted account %s", actor.id, user_id)

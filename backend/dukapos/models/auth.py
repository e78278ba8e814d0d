from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from ..permissions import Role, UserStatus
from .common import id_column, created_at_column, updated_at_column


class User(db.Model):
    """
    Platform account.

    phone_number is the login identifier and is globally unique. The role is
    one of the closed Role enum values; the business a MERCHANT operates is
    found through Business.owner_id, never through a column here.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_role_status", "role", "status"),
    )

    id = id_column()

    full_name = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=True, unique=True)

    # bcrypt hash; never serialized
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(32), nullable=False, default=Role.MERCHANT.value)
    status = db.Column(db.String(16), nullable=False, default=UserStatus.ACTIVE.value)

    # Display name of the business requested at provisioning time
    business_name = db.Column(db.String(255), nullable=True)
    profile_image_url = db.Column(db.String(512), nullable=True)

    created_by_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = created_at_column()
    updated_at = updated_at_column()
    last_login_at = db.Column(db.DateTime, nullable=True)

    created_by = db.relationship("User", remote_side=[id], foreign_keys=[created_by_id])

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<User id={self.id} phone={self.phone_number!r} role={self.role}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "business_name": self.business_name,
            "profile_image_url": self.profile_image_url,
            "created_by_id": self.created_by_id,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
            "last_login_at": to_iso(self.last_login_at),
        }


class SessionToken(db.Model):
    """
    Server-side session record.

    Only the SHA-256 hash of the bearer token is stored. expires_at slides
    forward on every successful validation.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_expires", "user_id", "expires_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    token_hash = db.Column(db.String(64), nullable=False, unique=True)

    created_at = created_at_column()
    last_used_at = db.Column(db.DateTime, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    user_agent = db.Column(db.String(512), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_iso(self.created_at),
            "last_used_at": to_iso(self.last_used_at),
            "expires_at": to_iso(self.expires_at),
        }

from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso


class SecurityEvent(db.Model):
    """
    Security event audit log.

    WHY: Track logins, denials, and account provisioning. The activity feeds
    of the APP Staff and Super Admin dashboards read from this table.

    user_id/target_user_id/business_id are plain columns, not foreign keys,
    so the trail survives deletion of the rows it mentions.

    IMMUTABLE: Never update. Append-only for audit integrity.
    """
    __tablename__ = "security_events"
    __table_args__ = (
        db.Index("ix_security_events_user_type", "user_id", "event_type"),
        db.Index("ix_security_events_occurred", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.String(36), nullable=True, index=True)  # Nullable for anonymous
    target_user_id = db.Column(db.String(36), nullable=True, index=True)
    target_role = db.Column(db.String(32), nullable=True)
    business_id = db.Column(db.String(36), nullable=True, index=True)

    # LOGIN_SUCCESS, LOGIN_FAILED, PERMISSION_DENIED, USER_CREATED, ...
    event_type = db.Column(db.String(64), nullable=False, index=True)
    resource = db.Column(db.String(128), nullable=True)  # e.g., "/api/users"
    action = db.Column(db.String(64), nullable=True)     # e.g., "POST", "CREATE_USER"

    success = db.Column(db.Boolean, nullable=False, index=True)
    reason = db.Column(db.Text, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    occurred_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "target_user_id": self.target_user_id,
            "target_role": self.target_role,
            "business_id": self.business_id,
            "event_type": self.event_type,
            "resource": self.resource,
            "action": self.action,
            "success": self.success,
            "reason": self.reason,
            "ip_address": self.ip_address,
            "occurred_at": to_iso(self.occurred_at),
        }

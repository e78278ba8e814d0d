# Overview: Service-layer operations for sessions; token issue, validation, and revocation.

"""
Session Token Management Service

WHY: Server-side sessions with a sliding expiry. The random token travels in
an http-only cookie; the server only ever stores its SHA-256 hash.

Persistence sits behind the SessionStore interface (get/set/destroy) so the
domain layer never touches a process-global map and tests can swap stores.
The default DatabaseSessionStore keeps sessions in the session_tokens table,
which any number of app processes can share.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- 7-day sliding expiry (SESSION_TTL_DAYS), renewed on every validation
- Sessions die with the account: inactive/suspended users are rejected and
  their sessions destroyed
"""

from __future__ import annotations

import hashlib
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, User
from ..time_utils import now


@dataclass(frozen=True)
class SessionRecord:
    user_id: str
    expires_at: datetime
    last_used_at: datetime | None = None


@dataclass
class SessionContext:
    """Validated session returned by validate_session."""
    user: User
    token: str
    expires_at: datetime


class SessionStore(ABC):
    """
    Storage for session records keyed by the plaintext token.

    Implementations stage changes in the current unit of work; callers
    commit.
    """

    @abstractmethod
    def get(self, token: str) -> SessionRecord | None:
        ...

    @abstractmethod
    def set(
        self,
        token: str,
        user_id: str,
        expires_at: datetime,
        *,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> None:
        ...

    @abstractmethod
    def destroy(self, token: str) -> bool:
        ...

    @abstractmethod
    def destroy_all(self, user_id: str) -> int:
        ...

    @abstractmethod
    def purge_expired(self, as_of: datetime) -> int:
        ...


def hash_token(token: str) -> str:
    """
    Hash token for database storage using SHA-256.

    Tokens are already high-entropy, so a fast hash is sufficient.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


class DatabaseSessionStore(SessionStore):
    """SessionStore over the session_tokens table."""

    def _row(self, token: str) -> SessionToken | None:
        return db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()

    def get(self, token: str) -> SessionRecord | None:
        row = self._row(token)
        if not row:
            return None
        return SessionRecord(user_id=row.user_id, expires_at=row.expires_at, last_used_at=row.last_used_at)

    def set(self, token, user_id, expires_at, *, user_agent=None, ip_address=None) -> None:
        row = self._row(token)
        current = now()
        if row is None:
            row = SessionToken(
                user_id=user_id,
                token_hash=hash_token(token),
                created_at=current,
                user_agent=user_agent,
                ip_address=ip_address,
            )
            db.session.add(row)
        row.last_used_at = current
        row.expires_at = expires_at
        db.session.flush()

    def destroy(self, token: str) -> bool:
        deleted = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).delete()
        return deleted > 0

    def destroy_all(self, user_id: str) -> int:
        return db.session.query(SessionToken).filter_by(user_id=user_id).delete()

    def purge_expired(self, as_of: datetime) -> int:
        return db.session.query(SessionToken).filter(SessionToken.expires_at < as_of).delete()


def get_store() -> SessionStore:
    store = current_app.extensions.get("session_store")
    if store is None:
        store = DatabaseSessionStore()
        current_app.extensions["session_store"] = store
    return store


def session_ttl() -> timedelta:
    return timedelta(days=current_app.config.get("SESSION_TTL_DAYS", 7))


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    This is the plaintext token sent to client (never stored).
    """
    return secrets.token_hex(32)


def create_session(
    user_id: str,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[str, datetime]:
    """
    Issue a new session for the user.

    Returns (plaintext_token, expires_at).
    """
    token = generate_token()
    expires_at = now() + session_ttl()
    get_store().set(token, user_id, expires_at, user_agent=user_agent, ip_address=ip_address)
    db.session.commit()
    return token, expires_at


def validate_session(token: str | None) -> SessionContext | None:
    """
    Validate a session token and slide its expiry forward.

    Returns None if:
    - Token is missing, unknown, or expired
    - The user no longer exists or is not active

    Expired and dead-account sessions are destroyed on sight.
    """
    if not token:
        return None

    store = get_store()
    record = store.get(token)
    if record is None:
        return None

    current = now()
    if record.expires_at <= current:
        store.destroy(token)
        db.session.commit()
        return None

    user = db.session.get(User, record.user_id)
    if not user or not user.is_active:
        store.destroy(token)
        db.session.commit()
        return None

    expires_at = current + session_ttl()
    store.set(token, user.id, expires_at)
    db.session.commit()

    return SessionContext(user=user, token=token, expires_at=expires_at)


def destroy_session(token: str | None) -> bool:
    """
    Destroy a session (logout).

    Returns True if a session was removed, False if none matched.
    """
    if not token:
        return False
    removed = get_store().destroy(token)
    db.session.commit()
    return removed


def destroy_all_user_sessions(user_id: str, *, commit: bool = True) -> int:
    """
    Destroy every session belonging to a user.

    Used when an account is deactivated, suspended, or deleted.
    """
    count = get_store().destroy_all(user_id)
    if commit:
        db.session.commit()
    return count


def cleanup_expired_sessions() -> int:
    """
    Delete expired sessions.

    Returns count of sessions deleted. Run periodically (flask maintenance
    cleanup-sessions).
    """
    deleted = get_store().purge_expired(now())
    db.session.commit()
    return deleted

# Overview: Pytest coverage for server-side sessions and the SessionStore interface.

"""
Session service tests.

Verifies:
- Tokens are stored hashed, never in plaintext
- Expiry slides forward on every validation
- Expired sessions and sessions of non-active accounts are destroyed on sight
- Suspending a user ends all of their sessions
- The store is replaceable behind SessionStore
"""

from datetime import timedelta

import pytest

from dukapos.models import SessionToken
from dukapos.permissions import UserStatus
from dukapos.services import session_service
from dukapos.services.session_service import SessionRecord, SessionStore, hash_token
from dukapos.time_utils import now
from conftest import auth_headers


class InMemorySessionStore(SessionStore):
    """Dict-backed store used to prove the domain layer is storage-agnostic."""

    def __init__(self):
        self.records = {}

    def get(self, token):
        return self.records.get(token)

    def set(self, token, user_id, expires_at, *, user_agent=None, ip_address=None):
        self.records[token] = SessionRecord(user_id=user_id, expires_at=expires_at, last_used_at=now())

    def destroy(self, token):
        return self.records.pop(token, None) is not None

    def destroy_all(self, user_id):
        doomed = [t for t, r in self.records.items() if r.user_id == user_id]
        for token in doomed:
            del self.records[token]
        return len(doomed)

    def purge_expired(self, as_of):
        doomed = [t for t, r in self.records.items() if r.expires_at < as_of]
        for token in doomed:
            del self.records[token]
        return len(doomed)


def _row(db_session, token):
    return db_session.query(SessionToken).filter_by(token_hash=hash_token(token)).one_or_none()


class TestDatabaseSessionStore:

    def test_token_stored_hashed(self, app, db_session, merchant_a):
        token, expires_at = session_service.create_session(user_id=merchant_a.id)

        assert len(token) == 64
        assert db_session.query(SessionToken).filter_by(token_hash=token).count() == 0
        row = _row(db_session, token)
        assert row is not None
        assert row.expires_at == expires_at

    def test_new_session_lasts_seven_days(self, app, db_session, merchant_a):
        before = now()
        _, expires_at = session_service.create_session(user_id=merchant_a.id)
        assert before + timedelta(days=7) <= expires_at <= now() + timedelta(days=7)

    def test_validation_slides_expiry(self, app, db_session, merchant_a):
        token, _ = session_service.create_session(user_id=merchant_a.id)
        row = _row(db_session, token)
        row.expires_at = now() + timedelta(hours=1)
        db_session.commit()

        context = session_service.validate_session(token)

        assert context is not None
        assert context.user.id == merchant_a.id
        assert context.expires_at > now() + timedelta(days=6)
        db_session.expire_all()
        assert _row(db_session, token).expires_at == context.expires_at

    def test_expired_session_destroyed(self, app, db_session, merchant_a):
        token, _ = session_service.create_session(user_id=merchant_a.id)
        row = _row(db_session, token)
        row.expires_at = now() - timedelta(seconds=1)
        db_session.commit()

        assert session_service.validate_session(token) is None
        assert _row(db_session, token) is None

    @pytest.mark.parametrize("status", [UserStatus.INACTIVE.value, UserStatus.SUSPENDED.value])
    def test_session_of_non_active_user_rejected(self, app, db_session, merchant_a, status):
        token, _ = session_service.create_session(user_id=merchant_a.id)
        merchant_a.status = status
        db_session.commit()

        assert session_service.validate_session(token) is None
        assert _row(db_session, token) is None

    def test_unknown_and_missing_tokens(self, app, db_session):
        assert session_service.validate_session(None) is None
        assert session_service.validate_session("") is None
        assert session_service.validate_session("0" * 64) is None

    def test_destroy_all_user_sessions(self, app, db_session, merchant_a, merchant_b):
        session_service.create_session(user_id=merchant_a.id)
        session_service.create_session(user_id=merchant_a.id)
        other, _ = session_service.create_session(user_id=merchant_b.id)

        assert session_service.destroy_all_user_sessions(merchant_a.id) == 2
        assert db_session.query(SessionToken).filter_by(user_id=merchant_a.id).count() == 0
        assert session_service.validate_session(other) is not None

    def test_cleanup_expired_sessions(self, app, db_session, merchant_a):
        live, _ = session_service.create_session(user_id=merchant_a.id)
        stale, _ = session_service.create_session(user_id=merchant_a.id)
        _row(db_session, stale).expires_at = now() - timedelta(days=1)
        db_session.commit()

        assert session_service.cleanup_expired_sessions() == 1
        assert _row(db_session, live) is not None
        assert _row(db_session, stale) is None


class TestSwappableStore:

    def test_in_memory_store_drives_the_api(self, app, client, db_session, merchant_a, monkeypatch):
        store = InMemorySessionStore()
        monkeypatch.setitem(app.extensions, "session_store", store)

        token, _ = session_service.create_session(user_id=merchant_a.id)
        assert token in store.records
        assert db_session.query(SessionToken).count() == 0

        resp = client.get('/api/auth/user', headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.get_json()['id'] == merchant_a.id

        assert session_service.destroy_session(token) is True
        assert token not in store.records
        resp = client.get('/api/auth/user', headers=auth_headers(token))
        assert resp.status_code == 401

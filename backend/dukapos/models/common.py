# Overview: Shared column helpers for model primary keys and timestamps.

import uuid

from ..extensions import db
from ..time_utils import now


def new_id() -> str:
    """Opaque identifier for user-facing rows."""
    return str(uuid.uuid4())


def id_column():
    return db.Column(db.String(36), primary_key=True, default=new_id)


def created_at_column():
    # Python-side default: "today" windows are computed in server-local time
    return db.Column(db.DateTime, nullable=False, default=now, index=True)


def updated_at_column():
    return db.Column(db.DateTime, nullable=False, default=now, onupdate=now)

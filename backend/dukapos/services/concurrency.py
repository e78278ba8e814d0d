# Overview: Transaction and locking helpers for write paths that must be all-or-nothing.

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import text

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; begin_write() covers it there.
    """
    return query.with_for_update()


def begin_write() -> None:
    """
    Open the write transaction before the first read.

    SQLite: BEGIN IMMEDIATE takes the database write lock up front, so two
    concurrent units of work serialize instead of both reading the same
    stock and failing at commit. Other engines rely on lock_for_update().
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


@contextmanager
def atomic(*, write_lock: bool = True):
    """
    Unit of work: commit on success, roll back everything on any exception.

    No retry: the caller sees the original failure.
    """
    try:
        if write_lock:
            begin_write()
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

# Overview: Service-layer operations for expenses; business-scoped CRUD.

from __future__ import annotations

from ..extensions import db
from ..models import Expense
from .listing import list_response
from .tenant_service import get_scoped

EXPENSE_MUTABLE_FIELDS = {"description", "amount_cents", "category"}


def list_expenses(business_id: str, *, page: int | None = None, per_page: int | None = None) -> dict:
    query = (
        db.session.query(Expense)
        .filter(Expense.business_id == business_id)
        .order_by(Expense.created_at.desc(), Expense.id.asc())
    )
    return list_response(query, page, per_page)


def create_expense(*, patch: dict, business_id: str, recorded_by_id: str) -> Expense:
    expense = Expense(business_id=business_id, recorded_by_id=recorded_by_id, **patch)
    db.session.add(expense)
    db.session.commit()
    return expense


def update_expense(*, expense_id: str, patch: dict, business_id: str) -> Expense:
    expense = get_scoped(Expense, expense_id, business_id)
    for k, v in patch.items():
        if k in EXPENSE_MUTABLE_FIELDS:
            setattr(expense, k, v)
    db.session.commit()
    return expense


def delete_expense(*, expense_id: str, business_id: str) -> None:
    expense = get_scoped(Expense, expense_id, business_id)
    db.session.delete(expense)
    db.session.commit()

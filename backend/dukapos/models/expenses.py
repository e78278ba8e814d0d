from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from ..validation import format_cents
from .common import id_column, created_at_column


class Expense(db.Model):
    """Business expense; category is free text (see EXPENSE_CATEGORIES)."""
    __tablename__ = "expenses"

    id = id_column()
    business_id = db.Column(db.String(36), db.ForeignKey("businesses.id"), nullable=False, index=True)
    recorded_by_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    description = db.Column(db.Text, nullable=False)
    amount_cents = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(128), nullable=False)

    created_at = created_at_column()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "business_id": self.business_id,
            "recorded_by_id": self.recorded_by_id,
            "description": self.description,
            "amount": format_cents(self.amount_cents),
            "category": self.category,
            "created_at": to_iso(self.created_at),
        }

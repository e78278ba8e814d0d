from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from .common import id_column, created_at_column, updated_at_column


class Customer(db.Model):
    """
    Customer contact record.

    MULTI-TENANT: scoped by business_id. Sales reference customers
    optionally; deleting a customer detaches them from historical sales.
    """
    __tablename__ = "customers"

    id = id_column()
    business_id = db.Column(db.String(36), db.ForeignKey("businesses.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)
    address = db.Column(db.Text, nullable=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "business_id": self.business_id,
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "address": self.address,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

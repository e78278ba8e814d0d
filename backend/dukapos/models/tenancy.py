from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from .common import id_column, created_at_column, updated_at_column


class Business(db.Model):
    """
    Tenant root.

    MULTI-TENANT: every operational row (products, categories, customers,
    sales, expenses) carries a direct business_id. A caller's business is the
    one whose owner_id is the caller's user id.
    """
    __tablename__ = "businesses"

    id = id_column()
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    address = db.Column(db.Text, nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    owner = db.relationship("User", backref=db.backref("business", uselist=False, lazy=True))

    def __repr__(self) -> str:
        return f"<Business id={self.id} name={self.name!r} owner_id={self.owner_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "phone_number": self.phone_number,
            "email": self.email,
            "owner_id": self.owner_id,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from ..validation import format_cents
from .common import id_column, created_at_column, updated_at_column


class Category(db.Model):
    __tablename__ = "categories"

    id = id_column()
    business_id = db.Column(db.String(36), db.ForeignKey("businesses.id"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = created_at_column()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "business_id": self.business_id,
            "name": self.name,
            "description": self.description,
            "created_at": to_iso(self.created_at),
        }


class Product(db.Model):
    """
    Sellable product or service.

    MULTI-TENANT: scoped by business_id.

    Stock is only tracked for type == "product"; services are never
    stock-checked or decremented. Price is stored in integer cents and
    snapshotted onto sale items at sale time.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_business_active", "business_id", "is_active"),
    )

    id = id_column()
    business_id = db.Column(db.String(36), db.ForeignKey("businesses.id"), nullable=False, index=True)
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(16), nullable=False, default="product")

    # Authoritative storage in cents (clients send/receive decimal strings)
    price_cents = db.Column(db.Integer, nullable=False)

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    min_stock_level = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    category = db.relationship("Category", backref=db.backref("products", lazy=True))

    @property
    def is_service(self) -> bool:
        return self.type == "service"

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} business_id={self.business_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "business_id": self.business_id,
            "category_id": self.category_id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "price": format_cents(self.price_cents),
            "stock_quantity": self.stock_quantity,
            "min_stock_level": self.min_stock_level,
            "is_active": self.is_active,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

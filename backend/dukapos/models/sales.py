from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso
from ..validation import format_cents
from .common import id_column, created_at_column


class Sale(db.Model):
    """
    Completed sale.

    INVARIANT: total_amount_cents == sum(item.total_price_cents). Both sides
    are computed server-side inside the same transaction that writes the
    items and decrements stock.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_business_created", "business_id", "created_at"),
    )

    id = id_column()
    business_id = db.Column(db.String(36), db.ForeignKey("businesses.id"), nullable=False, index=True)
    sold_by_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)

    total_amount_cents = db.Column(db.Integer, nullable=False)
    payment_method = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(16), nullable=False, default="completed")

    created_at = created_at_column()

    customer = db.relationship("Customer", lazy="joined")
    sold_by = db.relationship("User")
    items = db.relationship(
        "SaleItem",
        backref="sale",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="SaleItem.position",
    )

    def to_dict(self, *, include_items: bool = True) -> dict:
        data = {
            "id": self.id,
            "business_id": self.business_id,
            "sold_by_id": self.sold_by_id,
            "customer_id": self.customer_id,
            "total_amount": format_cents(self.total_amount_cents),
            "payment_method": self.payment_method,
            "status": self.status,
            "created_at": to_iso(self.created_at),
        }
        if include_items:
            data["customer"] = self.customer.to_dict() if self.customer else None
            data["items"] = [item.to_dict() for item in self.items]
        return data


class SaleItem(db.Model):
    """Sale line with the unit price frozen at sale time."""
    __tablename__ = "sale_items"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
    )

    id = id_column()
    sale_id = db.Column(db.String(36), db.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey("products.id"), nullable=False, index=True)

    position = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    total_price_cents = db.Column(db.Integer, nullable=False)

    product = db.relationship("Product", lazy="joined")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_id": self.sale_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": format_cents(self.unit_price_cents),
            "total_price": format_cents(self.total_price_cents),
            "product": self.product.to_dict() if self.product else None,
        }

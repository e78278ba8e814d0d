# backend/dukapos/services/products_service.py
"""
Products Service with Multi-Tenant Support

MULTI-TENANT: All product operations are business-scoped.
- list/create are filtered/stamped with the caller's business_id
- update/delete look the product up by (id, business_id)
- a category_id must reference a category of the same business
"""
from __future__ import annotations

from ..extensions import db
from ..errors import ValidationError
from ..models import Category, Product, SaleItem
from .listing import list_response
from .tenant_service import get_scoped

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "description",
    "type",
    "price_cents",
    "stock_quantity",
    "min_stock_level",
    "category_id",
    "is_active",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _check_category(business_id: str, category_id: str | None) -> None:
    if category_id is None:
        return
    exists = db.session.query(Category.id).filter_by(id=category_id, business_id=business_id).first()
    if not exists:
        raise ValidationError("category_id does not reference a category of this business")


def list_products(
    business_id: str,
    *,
    include_inactive: bool = False,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    Business-scoped product listing, newest first.

    Deactivated products (kept only because past sales reference them) are
    hidden unless include_inactive is set.
    """
    query = db.session.query(Product).filter(Product.business_id == business_id)
    if not include_inactive:
        query = query.filter(Product.is_active.is_(True))
    query = query.order_by(Product.created_at.desc(), Product.id.asc())
    return list_response(query, page, per_page)


def create_product(*, patch: dict, business_id: str) -> Product:
    _check_category(business_id, patch.get("category_id"))

    product = Product(business_id=business_id)
    apply_product_patch(product, patch)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(*, product_id: str, patch: dict, business_id: str) -> Product:
    product = get_scoped(Product, product_id, business_id)
    if "category_id" in patch:
        _check_category(business_id, patch["category_id"])

    apply_product_patch(product, patch)
    db.session.commit()
    return product


def delete_product(*, product_id: str, business_id: str) -> dict:
    """
    Delete a product.

    A product that appears on any sale item is deactivated instead, so
    historical sales keep their product reference.
    """
    product = get_scoped(Product, product_id, business_id)

    referenced = db.session.query(SaleItem.id).filter_by(product_id=product.id).first() is not None
    if referenced:
        product.is_active = False
        db.session.commit()
        return {"ok": True, "deactivated": True}

    db.session.delete(product)
    db.session.commit()
    return {"ok": True, "deactivated": False}


def low_stock_products(business_id: str) -> list[Product]:
    """Active physical products with stock_quantity <= min_stock_level."""
    return (
        db.session.query(Product)
        .filter(
            Product.business_id == business_id,
            Product.is_active.is_(True),
            Product.type == "product",
            Product.stock_quantity <= Product.min_stock_level,
        )
        .order_by(Product.stock_quantity.asc(), Product.name.asc())
        .all()
    )

# Overview: Service-layer operations for product categories.

from __future__ import annotations

from ..extensions import db
from ..models import Category
from .listing import list_response


def list_categories(business_id: str) -> dict:
    query = (
        db.session.query(Category)
        .filter(Category.business_id == business_id)
        .order_by(Category.name.asc())
    )
    return list_response(query)


def create_category(*, patch: dict, business_id: str) -> Category:
    category = Category(business_id=business_id, **patch)
    db.session.add(category)
    db.session.commit()
    return category

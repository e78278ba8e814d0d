# Overview: Service-layer operations for customers; business-scoped CRUD.

from __future__ import annotations

from ..extensions import db
from ..models import Customer, Sale
from .listing import list_response
from .tenant_service import get_scoped

CUSTOMER_MUTABLE_FIELDS = {"name", "email", "phone_number", "address"}


def list_customers(business_id: str, *, page: int | None = None, per_page: int | None = None) -> dict:
    query = (
        db.session.query(Customer)
        .filter(Customer.business_id == business_id)
        .order_by(Customer.created_at.desc(), Customer.id.asc())
    )
    return list_response(query, page, per_page)


def create_customer(*, patch: dict, business_id: str) -> Customer:
    customer = Customer(business_id=business_id, **patch)
    db.session.add(customer)
    db.session.commit()
    return customer


def update_customer(*, customer_id: str, patch: dict, business_id: str) -> Customer:
    customer = get_scoped(Customer, customer_id, business_id)
    for k, v in patch.items():
        if k in CUSTOMER_MUTABLE_FIELDS:
            setattr(customer, k, v)
    db.session.commit()
    return customer


def delete_customer(*, customer_id: str, business_id: str) -> None:
    """Delete a customer; their past sales stay, detached from them."""
    customer = get_scoped(Customer, customer_id, business_id)
    db.session.query(Sale).filter(
        Sale.business_id == business_id,
        Sale.customer_id == customer.id,
    ).update({Sale.customer_id: None})
    db.session.delete(customer)
    db.session.commit()

"""
Sales Service - atomic sale recording

WHY: A sale is one unit of work. The sale row, its item rows, and every
stock decrement commit together or not at all; a sale without items, or
stock moved without a sale, never becomes visible.

Prices come from the database, never from the client. Client-sent totals
are only compared against the server's numbers and a mismatch rejects the
sale. Stock never goes negative: each decrement is a conditional UPDATE
that only matches while enough stock remains, so concurrent sales of the
same product cannot lose updates or oversell.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from ..extensions import db
from ..errors import DomainError, InsufficientStock, NotFoundError, UnexpectedError, ValidationError
from ..models import Customer, Product, Sale, SaleItem
from ..time_utils import now
from ..validation import MAX_MONEY_CENTS, format_cents, parse_money_cents, require_payment_method, require_positive_int
from .concurrency import atomic, lock_for_update
from .listing import list_response
from .tenant_service import get_scoped


class SaleError(ValidationError):
    """Raised when a sale request is rejected before anything is written."""
    pass


@dataclass(frozen=True)
class SaleLineRequest:
    product_id: str
    quantity: int
    unit_price_cents: int | None = None
    total_price_cents: int | None = None


@dataclass(frozen=True)
class SaleRequest:
    payment_method: str
    lines: list[SaleLineRequest]
    customer_id: str | None = None
    total_amount_cents: int | None = None


def parse_sale_request(payload) -> SaleRequest:
    """
    Validate the shape of a sale payload.

    Expected:
        {"payment_method": "cash", "customer_id": "...?",
         "items": [{"product_id": "...", "quantity": 3,
                    "unit_price": "10.00"?, "total_price": "30.00"?}],
         "total_amount": "30.00"?}
    """
    if not isinstance(payload, dict):
        raise SaleError("Invalid JSON payload")

    payment_method = require_payment_method(payload.get("payment_method"))

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise SaleError("items must be a non-empty list")

    lines = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise SaleError(f"items[{index}] must be an object")
        product_id = raw.get("product_id")
        if not isinstance(product_id, str) or not product_id.strip():
            raise SaleError(f"items[{index}].product_id is required")
        quantity = require_positive_int(raw.get("quantity"), f"items[{index}].quantity")
        unit_price = raw.get("unit_price")
        total_price = raw.get("total_price")
        lines.append(SaleLineRequest(
            product_id=product_id.strip(),
            quantity=quantity,
            unit_price_cents=parse_money_cents(unit_price, f"items[{index}].unit_price") if unit_price is not None else None,
            total_price_cents=parse_money_cents(total_price, f"items[{index}].total_price") if total_price is not None else None,
        ))

    customer_id = payload.get("customer_id") or None
    if customer_id is not None and not isinstance(customer_id, str):
        raise SaleError("customer_id must be a string")

    total_amount = payload.get("total_amount")
    return SaleRequest(
        payment_method=payment_method,
        lines=lines,
        customer_id=customer_id,
        total_amount_cents=parse_money_cents(total_amount, "total_amount") if total_amount is not None else None,
    )


def _load_products(business_id: str, product_ids: set[str]) -> dict[str, Product]:
    products = lock_for_update(
        db.session.query(Product).filter(
            Product.id.in_(product_ids),
            Product.business_id == business_id,
        )
    ).all()
    by_id = {p.id: p for p in products}

    missing = sorted(product_ids - by_id.keys())
    if missing:
        raise NotFoundError("Product not found", details={"product_ids": missing})

    inactive = sorted(p.id for p in products if not p.is_active)
    if inactive:
        raise SaleError("Product is not available for sale", details={"product_ids": inactive})

    return by_id


def _price_lines(request: SaleRequest, products: dict[str, Product]) -> tuple[list[dict], int]:
    priced = []
    mismatches = []
    for index, line in enumerate(request.lines):
        unit = products[line.product_id].price_cents
        total = unit * line.quantity
        if total > MAX_MONEY_CENTS:
            raise SaleError(
                f"items[{index}] total cannot exceed {format_cents(MAX_MONEY_CENTS)}",
                details={"item": index, "product_id": line.product_id},
            )
        if line.unit_price_cents is not None and line.unit_price_cents != unit:
            mismatches.append({"item": index, "field": "unit_price", "expected": format_cents(unit), "received": format_cents(line.unit_price_cents)})
        if line.total_price_cents is not None and line.total_price_cents != total:
            mismatches.append({"item": index, "field": "total_price", "expected": format_cents(total), "received": format_cents(line.total_price_cents)})
        priced.append({
            "product_id": line.product_id,
            "quantity": line.quantity,
            "unit_price_cents": unit,
            "total_price_cents": total,
        })

    sale_total = sum(p["total_price_cents"] for p in priced)
    if sale_total > MAX_MONEY_CENTS:
        raise SaleError(f"Sale total cannot exceed {format_cents(MAX_MONEY_CENTS)}")
    if request.total_amount_cents is not None and request.total_amount_cents != sale_total:
        mismatches.append({"field": "total_amount", "expected": format_cents(sale_total), "received": format_cents(request.total_amount_cents)})

    if mismatches:
        raise SaleError("Submitted prices do not match current product prices", details={"mismatches": mismatches})

    return priced, sale_total


def _decrement_stock(products: dict[str, Product], priced: list[dict]) -> None:
    requested: dict[str, int] = {}
    for line in priced:
        requested[line["product_id"]] = requested.get(line["product_id"], 0) + line["quantity"]

    insufficient = []
    for product_id, qty in requested.items():
        product = products[product_id]
        if product.is_service:
            continue
        available = product.stock_quantity
        result = db.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= qty)
            .values(stock_quantity=Product.stock_quantity - qty, updated_at=now())
        )
        if result.rowcount != 1:
            insufficient.append({
                "product_id": product_id,
                "name": product.name,
                "requested_quantity": qty,
                "available": available,
            })

    if insufficient:
        raise InsufficientStock("Insufficient stock to complete sale", details={"items": insufficient})


def create_sale(*, business_id: str, seller_id: str, request: SaleRequest) -> Sale:
    """
    Record a sale atomically.

    Raises:
        SaleError (400): inactive product or price/total mismatch
        NotFoundError (404): product or customer outside the business
        InsufficientStock (409): a physical product lacks stock
        UnexpectedError (500): store failure; nothing was written
    """
    try:
        with atomic():
            if request.customer_id is not None:
                customer = db.session.query(Customer.id).filter_by(
                    id=request.customer_id, business_id=business_id
                ).first()
                if not customer:
                    raise NotFoundError("Customer not found")

            products = _load_products(business_id, {line.product_id for line in request.lines})
            priced, sale_total = _price_lines(request, products)
            _decrement_stock(products, priced)

            sale = Sale(
                business_id=business_id,
                sold_by_id=seller_id,
                customer_id=request.customer_id,
                payment_method=request.payment_method,
                total_amount_cents=sale_total,
                status="completed",
            )
            for position, line in enumerate(priced):
                sale.items.append(SaleItem(position=position, **line))
            db.session.add(sale)
            db.session.flush()
    except DomainError:
        raise
    except SQLAlchemyError as exc:
        current_app.logger.exception("Failed to record sale for business %s", business_id)
        raise UnexpectedError("Sale could not be recorded; no changes were made") from exc

    return sale


def _sales_query(business_id: str):
    return (
        db.session.query(Sale)
        .options(selectinload(Sale.items))
        .filter(Sale.business_id == business_id)
    )


def list_sales(business_id: str, *, page: int | None = None, per_page: int | None = None) -> dict:
    """Sales newest first, each with its customer and items (with product)."""
    query = _sales_query(business_id).order_by(Sale.created_at.desc(), Sale.id.asc())
    return list_response(query, page, per_page)


def get_sale(*, sale_id: str, business_id: str) -> Sale:
    return get_scoped(Sale, sale_id, business_id, query=_sales_query(business_id))

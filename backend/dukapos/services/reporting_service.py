# Overview: Service-layer operations for analytics; dashboard, weekly sales, and platform views.

"""
Reporting Service

All "today" and "this month" windows are half-open ranges in server-local
time: [start, end). A sale stamped 23:59:59 belongs to its day; one stamped
00:00:00 the next day does not.

Money leaves this module as two-decimal strings; growth as a percentage
rounded to two places.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import Business, Customer, Product, Sale, SaleItem, SecurityEvent, User
from ..permissions import Role, UserStatus
from ..time_utils import day_window, month_start, now, previous_month_start, start_of_day, to_iso
from ..validation import format_cents


ACTIVITY_EVENT_TYPES = (
    "USER_CREATED",
    "USER_STATUS_CHANGED",
    "USER_DELETED",
    "BUSINESS_CREATED",
)


def _sales_total_cents(*filters) -> int:
    total = db.session.query(func.coalesce(func.sum(Sale.total_amount_cents), 0)).filter(*filters).scalar()
    return int(total or 0)


def dashboard_stats(business_id: str, as_of: datetime | None = None) -> dict:
    """Today's sales, transactions, new customers, and units sold for one business."""
    start, end = day_window(as_of or now())
    in_window = (Sale.business_id == business_id, Sale.created_at >= start, Sale.created_at < end)

    sales_row = db.session.query(
        func.coalesce(func.sum(Sale.total_amount_cents), 0),
        func.count(Sale.id),
    ).filter(*in_window).one()

    products_sold = db.session.query(
        func.coalesce(func.sum(SaleItem.quantity), 0)
    ).join(Sale, SaleItem.sale_id == Sale.id).filter(*in_window).scalar()

    new_customers = db.session.query(func.count(Customer.id)).filter(
        Customer.business_id == business_id,
        Customer.created_at >= start,
        Customer.created_at < end,
    ).scalar()

    return {
        "today_sales": format_cents(int(sales_row[0] or 0)),
        "today_transactions": int(sales_row[1] or 0),
        "new_customers_today": int(new_customers or 0),
        "products_sold_today": int(products_sold or 0),
    }


def _date_key(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def weekly_sales(business_id: str, start: date | None = None) -> list[dict]:
    """
    Sales summed per calendar day over [start, start + 7 days), ascending.

    Days without sales are omitted. Default start: six days before today,
    so the window ends with today.
    """
    if start is None:
        start = now().date() - timedelta(days=6)
    window_start = start_of_day(start)
    window_end = window_start + timedelta(days=7)

    day = func.date(Sale.created_at)
    rows = db.session.query(
        day.label("day"),
        func.coalesce(func.sum(Sale.total_amount_cents), 0).label("amount"),
    ).filter(
        Sale.business_id == business_id,
        Sale.created_at >= window_start,
        Sale.created_at < window_end,
    ).group_by(day).order_by(day.asc()).all()

    return [
        {"date": _date_key(row.day), "amount": format_cents(int(row.amount or 0))}
        for row in rows
        if row.amount
    ]


def monthly_growth(as_of: datetime | None = None) -> float:
    """
    Percent change in platform-wide sales: month-to-date vs previous month.

    Returns 0 when the previous month had no sales.
    """
    current = as_of or now()
    this_start = month_start(current)
    last_start = previous_month_start(current)

    this_total = _sales_total_cents(Sale.created_at >= this_start, Sale.created_at <= current)
    last_total = _sales_total_cents(Sale.created_at >= last_start, Sale.created_at < this_start)

    if last_total == 0:
        return 0
    return round((this_total - last_total) / last_total * 100, 2)


def _count_users(*filters) -> int:
    return int(db.session.query(func.count(User.id)).filter(*filters).scalar() or 0)


def app_staff_stats(as_of: datetime | None = None) -> dict:
    merchant = User.role == Role.MERCHANT.value
    active = User.status == UserStatus.ACTIVE.value
    return {
        "total_merchants": _count_users(merchant),
        "active_merchants": _count_users(merchant, active),
        "inactive_merchants": _count_users(merchant, ~active),
        "total_businesses": int(db.session.query(func.count(Business.id)).scalar() or 0),
        "total_sales": format_cents(_sales_total_cents()),
        "monthly_growth": monthly_growth(as_of),
    }


def list_merchants() -> list[dict]:
    """MERCHANT accounts, newest first, each with its business (or null)."""
    rows = (
        db.session.query(User, Business)
        .outerjoin(Business, Business.owner_id == User.id)
        .filter(User.role == Role.MERCHANT.value)
        .order_by(User.created_at.desc())
        .all()
    )
    merchants = []
    for user, business in rows:
        data = user.to_dict()
        data["business"] = business.to_dict() if business else None
        merchants.append(data)
    return merchants


def super_admin_stats(as_of: datetime | None = None) -> dict:
    current = as_of or now()
    today_start, today_end = day_window(current)
    active = User.status == UserStatus.ACTIVE.value

    sales_count = int(db.session.query(func.count(Sale.id)).scalar() or 0)
    super_admins = _count_users(User.role == Role.SUPER_ADMIN.value, active)
    total_revenue = _sales_total_cents()

    return {
        "app_staff": _count_users(User.role == Role.APP_STAFF.value),
        "active_sponsors": _count_users(User.role == Role.SPONSOR.value, active),
        "total_merchants": _count_users(User.role == Role.MERCHANT.value),
        "total_users": _count_users(),
        "active_users": _count_users(active),
        "total_businesses": int(db.session.query(func.count(Business.id)).scalar() or 0),
        "total_products": int(db.session.query(func.count(Product.id)).scalar() or 0),
        "total_sales_count": sales_count,
        "total_revenue": format_cents(total_revenue),
        "revenue_growth": monthly_growth(current),
        "total_sales_today": format_cents(
            _sales_total_cents(Sale.created_at >= today_start, Sale.created_at < today_end)
        ),
        # No active super admin means nobody can provision platform staff
        "system_health": "healthy" if super_admins else "degraded",
    }


def recent_activities(*, target_roles: set[str] | None = None, limit: int = 20) -> list[dict]:
    """
    Account-lifecycle events from the audit trail, newest first.

    target_roles narrows to events about accounts of those roles (business
    creation is included whenever MERCHANT is among them).
    """
    query = db.session.query(SecurityEvent).filter(
        SecurityEvent.event_type.in_(ACTIVITY_EVENT_TYPES),
        SecurityEvent.success.is_(True),
    )
    if target_roles is not None:
        condition = SecurityEvent.target_role.in_(sorted(target_roles))
        if Role.MERCHANT.value in target_roles:
            condition = condition | (SecurityEvent.event_type == "BUSINESS_CREATED")
        query = query.filter(condition)

    events = query.order_by(SecurityEvent.occurred_at.desc(), SecurityEvent.id.desc()).limit(limit).all()
    return [
        {
            "id": event.id,
            "type": event.event_type.lower(),
            "description": event.reason,
            "time": to_iso(event.occurred_at),
        }
        for event in events
    ]

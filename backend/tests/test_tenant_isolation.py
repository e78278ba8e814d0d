# Overview: Pytest coverage for tenant isolation behavior.

"""
Multi-Tenant Isolation Tests

SECURITY TESTS: Prove that cross-business access is denied for every
business-owned resource.

These tests create two merchants, each owning one business, then verify
that:
1. Merchant A never sees Business B's rows in any listing
2. Reading, updating, or deleting a B row by id answers 404, exactly like a
   missing id, and leaves the row untouched
3. A sale cannot reference B's products or customers
4. Cross-business attempts are logged as security events
"""

import pytest

from dukapos.errors import BusinessNotFound, NotFoundError
from dukapos.models import Customer, Expense, Product, SecurityEvent
from dukapos.services.tenant_service import business_owned_by, get_scoped, require_business


class TestTenantServiceHelpers:
    """Test tenant_service helper functions."""

    def test_business_owned_by(self, db_session, merchant_a, business_a, sponsor):
        assert business_owned_by(merchant_a.id).id == business_a.id
        assert business_owned_by(sponsor.id) is None

    def test_require_business_raises_without_one(self, db_session, sponsor):
        with pytest.raises(BusinessNotFound):
            require_business(sponsor.id)

    def test_get_scoped_own_row(self, db_session, business_a, product_a):
        assert get_scoped(Product, product_a.id, business_a.id).id == product_a.id

    def test_get_scoped_foreign_row_is_not_found(self, db_session, business_a, product_b):
        with pytest.raises(NotFoundError) as exc_info:
            get_scoped(Product, product_b.id, business_a.id)
        assert exc_info.value.message == "Product not found"

    def test_cross_business_access_logs_security_event(self, app, db_session, business_a, product_b):
        with app.test_request_context():
            with pytest.raises(NotFoundError):
                get_scoped(Product, product_b.id, business_a.id)

        event = db_session.query(SecurityEvent).filter_by(
            event_type="CROSS_BUSINESS_ACCESS_DENIED"
        ).one()
        assert event.success is False
        assert event.business_id == business_a.id
        assert product_b.id in event.reason

    def test_missing_row_is_not_logged(self, db_session, business_a):
        with pytest.raises(NotFoundError):
            get_scoped(Product, "does-not-exist", business_a.id)
        assert db_session.query(SecurityEvent).filter_by(
            event_type="CROSS_BUSINESS_ACCESS_DENIED"
        ).count() == 0


class TestListingIsolation:

    @pytest.mark.parametrize("path", ["/api/products", "/api/customers", "/api/expenses", "/api/sales", "/api/categories"])
    def test_b_rows_never_listed_for_a(self, client, db_session, merchant_a_headers, merchant_b_headers, product_b, customer_b, path):
        client.post("/api/expenses", json={"description": "Fuel", "amount": "5.00", "category": "Travel"}, headers=merchant_b_headers)
        client.post("/api/categories", json={"name": "Bakery"}, headers=merchant_b_headers)
        client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": product_b.id, "quantity": 1}],
        }, headers=merchant_b_headers)

        resp = client.get(path, headers=merchant_a_headers)
        assert resp.status_code == 200
        assert resp.get_json()["items"] == []
        assert resp.get_json()["count"] == 0

        assert client.get(path, headers=merchant_b_headers).get_json()["count"] == 1


class TestByIdIsolation:

    def test_product_read_update_delete(self, client, db_session, merchant_a_headers, product_b):
        product_id = product_b.id

        assert client.get(f"/api/products/{product_id}", headers=merchant_a_headers).status_code == 404
        resp = client.put(f"/api/products/{product_id}", json={"price": "0.01"}, headers=merchant_a_headers)
        assert resp.status_code == 404
        assert client.delete(f"/api/products/{product_id}", headers=merchant_a_headers).status_code == 404

        db_session.expire_all()
        product = db_session.get(Product, product_id)
        assert product is not None
        assert product.price_cents == 2000

    def test_foreign_and_missing_ids_look_the_same(self, client, db_session, merchant_a_headers, product_b):
        foreign = client.put(f"/api/products/{product_b.id}", json={"name": "X"}, headers=merchant_a_headers)
        missing = client.put("/api/products/does-not-exist", json={"name": "X"}, headers=merchant_a_headers)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.get_json() == missing.get_json()

    def test_customer_update_delete(self, client, db_session, merchant_a_headers, customer_b):
        customer_id = customer_b.id
        assert client.put(f"/api/customers/{customer_id}", json={"name": "Hijack"}, headers=merchant_a_headers).status_code == 404
        assert client.delete(f"/api/customers/{customer_id}", headers=merchant_a_headers).status_code == 404

        db_session.expire_all()
        assert db_session.get(Customer, customer_id).name == "Juma"

    def test_expense_update_delete(self, client, db_session, merchant_a_headers, merchant_b_headers):
        created = client.post("/api/expenses", json={
            "description": "Fuel", "amount": "5.00", "category": "Travel",
        }, headers=merchant_b_headers).get_json()

        assert client.put(f"/api/expenses/{created['id']}", json={"amount": "1.00"}, headers=merchant_a_headers).status_code == 404
        assert client.delete(f"/api/expenses/{created['id']}", headers=merchant_a_headers).status_code == 404

        db_session.expire_all()
        assert db_session.get(Expense, created["id"]).amount_cents == 500

    def test_sale_read(self, client, db_session, merchant_a_headers, merchant_b_headers, product_b):
        sale = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": product_b.id, "quantity": 1}],
        }, headers=merchant_b_headers).get_json()

        assert client.get(f"/api/sales/{sale['id']}", headers=merchant_a_headers).status_code == 404
        assert client.get(f"/api/sales/{sale['id']}", headers=merchant_b_headers).status_code == 200

    def test_cross_business_update_logged(self, client, db_session, merchant_a, merchant_a_headers, product_b):
        client.put(f"/api/products/{product_b.id}", json={"name": "X"}, headers=merchant_a_headers)
        event = db_session.query(SecurityEvent).filter_by(
            event_type="CROSS_BUSINESS_ACCESS_DENIED"
        ).one()
        assert event.user_id == merchant_a.id


class TestSaleIsolation:

    def test_cannot_sell_foreign_product(self, client, db_session, merchant_a_headers, product_b):
        resp = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": product_b.id, "quantity": 1}],
        }, headers=merchant_a_headers)
        assert resp.status_code == 404

        db_session.expire_all()
        assert db_session.get(Product, product_b.id).stock_quantity == 5

    def test_cannot_attach_foreign_customer(self, client, db_session, merchant_a_headers, product_a, customer_b):
        resp = client.post("/api/sales", json={
            "payment_method": "cash",
            "customer_id": customer_b.id,
            "items": [{"product_id": product_a.id, "quantity": 1}],
        }, headers=merchant_a_headers)
        assert resp.status_code == 404

        db_session.expire_all()
        assert db_session.get(Product, product_a.id).stock_quantity == 10

    def test_cannot_use_foreign_category(self, client, db_session, merchant_a_headers, merchant_b_headers):
        category = client.post("/api/categories", json={"name": "Bakery"}, headers=merchant_b_headers).get_json()
        resp = client.post("/api/products", json={
            "name": "Cake", "price": "3.00", "category_id": category["id"],
        }, headers=merchant_a_headers)
        assert resp.status_code == 400

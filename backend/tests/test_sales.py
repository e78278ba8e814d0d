# Overview: Pytest coverage for atomic sale recording and stock safety.

"""
Sale transaction tests.

Verifies:
- Totals and unit prices are computed from the database
- Client-sent totals must match the server's numbers
- Stock is decremented for products and never for services
- Insufficient stock rejects the whole sale (409) with no partial writes
- A store failure mid-sale rolls everything back (500)
- Concurrent sales of one product never oversell or lose updates
"""

import threading

import pytest
from sqlalchemy.exc import SQLAlchemyError

from dukapos import create_app
from dukapos.errors import InsufficientStock, UnexpectedError
from dukapos.extensions import db
from dukapos.models import Business, Product, Sale, SaleItem
from dukapos.permissions import Role
from dukapos.services import sales_service
from dukapos.services.sales_service import SaleLineRequest, SaleRequest
from dukapos.services.user_service import provision_user


def _sale(*items, **extra):
    payload = {"payment_method": "cash", "items": list(items)}
    payload.update(extra)
    return payload


def _stock(db_session, product_id):
    db_session.expire_all()
    return db_session.get(Product, product_id).stock_quantity


class TestCreateSale:

    def test_sale_totals_and_stock(self, client, db_session, merchant_a, product_a, service_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale(
            {"product_id": product_a.id, "quantity": 3},
            {"product_id": service_a.id, "quantity": 1},
        ), headers=merchant_a_headers)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["total_amount"] == "55.00"
        assert body["status"] == "completed"
        assert body["sold_by_id"] == merchant_a.id
        assert [(i["quantity"], i["unit_price"], i["total_price"]) for i in body["items"]] == [
            (3, "10.00", "30.00"),
            (1, "25.00", "25.00"),
        ]

        assert _stock(db_session, product_a.id) == 7
        assert _stock(db_session, service_a.id) == 0

    def test_matching_client_total_accepted(self, client, db_session, product_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale(
            {"product_id": product_a.id, "quantity": 3, "unit_price": "10.00", "total_price": "30.00"},
            total_amount="30.00",
        ), headers=merchant_a_headers)
        assert resp.status_code == 201

    @pytest.mark.parametrize(
        "item_extra,sale_extra",
        [
            ({}, {"total_amount": "29.99"}),
            ({"unit_price": "9.00"}, {}),
            ({"total_price": "27.00"}, {}),
        ],
    )
    def test_mismatched_prices_rejected(self, client, db_session, product_a, merchant_a_headers, item_extra, sale_extra):
        item = {"product_id": product_a.id, "quantity": 3, **item_extra}
        resp = client.post("/api/sales", json=_sale(item, **sale_extra), headers=merchant_a_headers)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "SaleError"
        assert body["details"]["mismatches"]
        assert _stock(db_session, product_a.id) == 10
        assert db_session.query(Sale).count() == 0

    def test_customer_attached(self, client, db_session, product_a, customer_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale(
            {"product_id": product_a.id, "quantity": 1},
            customer_id=customer_a.id,
        ), headers=merchant_a_headers)
        assert resp.status_code == 201
        assert resp.get_json()["customer"]["name"] == "Neema"

    @pytest.mark.parametrize(
        "payload",
        [
            {"payment_method": "cash", "items": []},
            {"payment_method": "cash"},
            {"payment_method": "barter", "items": [{"product_id": "x", "quantity": 1}]},
            {"payment_method": "cash", "items": [{"product_id": "x", "quantity": 0}]},
            {"payment_method": "cash", "items": [{"product_id": "x", "quantity": -2}]},
            {"payment_method": "cash", "items": [{"quantity": 1}]},
            {"payment_method": "cash", "items": ["x"]},
        ],
    )
    def test_malformed_request_rejected(self, client, db_session, business_a, merchant_a_headers, payload):
        resp = client.post("/api/sales", json=payload, headers=merchant_a_headers)
        assert resp.status_code == 400
        assert db_session.query(Sale).count() == 0

    def test_oversized_quantity_rejected(self, client, db_session, product_a, service_a, merchant_a_headers):
        for product in (product_a, service_a):
            resp = client.post("/api/sales", json=_sale({"product_id": product.id, "quantity": 10**19}), headers=merchant_a_headers)
            assert resp.status_code == 400
            assert "cannot exceed" in resp.get_json()["message"]

        assert db_session.query(Sale).count() == 0
        assert _stock(db_session, product_a.id) == 10

    def test_line_total_over_money_cap_rejected(self, client, db_session, service_a, merchant_a_headers):
        # 25.00 x 400,000 = 10,000,000.00, above 9,999,999.99
        resp = client.post("/api/sales", json=_sale({"product_id": service_a.id, "quantity": 400_000}), headers=merchant_a_headers)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "SaleError"
        assert body["details"]["item"] == 0
        assert db_session.query(Sale).count() == 0

    def test_sale_total_over_money_cap_rejected(self, client, db_session, service_a, merchant_a_headers):
        # each line is 7,500,000.00; together they exceed the cap
        line = {"product_id": service_a.id, "quantity": 300_000}
        resp = client.post("/api/sales", json=_sale(line, line), headers=merchant_a_headers)
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Sale total cannot exceed")
        assert db_session.query(Sale).count() == 0

    def test_unknown_product(self, client, db_session, business_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale({"product_id": "missing", "quantity": 1}), headers=merchant_a_headers)
        assert resp.status_code == 404
        assert resp.get_json()["details"]["product_ids"] == ["missing"]


class TestStockSafety:

    def test_insufficient_stock_rejects_whole_sale(self, client, db_session, business_a, product_a, merchant_a_headers):
        scarce = Product(business_id=business_a.id, name="Rare", price_cents=500, stock_quantity=1)
        db_session.add(scarce)
        db_session.commit()
        scarce_id = scarce.id

        resp = client.post("/api/sales", json=_sale(
            {"product_id": product_a.id, "quantity": 2},
            {"product_id": scarce_id, "quantity": 2},
        ), headers=merchant_a_headers)

        assert resp.status_code == 409
        body = resp.get_json()
        assert body["error"] == "InsufficientStock"
        assert body["details"]["items"] == [{
            "product_id": scarce_id,
            "name": "Rare",
            "requested_quantity": 2,
            "available": 1,
        }]

        assert _stock(db_session, product_a.id) == 10
        assert _stock(db_session, scarce_id) == 1
        assert db_session.query(Sale).count() == 0
        assert db_session.query(SaleItem).count() == 0

    def test_repeated_lines_are_summed(self, client, db_session, product_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale(
            {"product_id": product_a.id, "quantity": 6},
            {"product_id": product_a.id, "quantity": 6},
        ), headers=merchant_a_headers)
        assert resp.status_code == 409
        assert _stock(db_session, product_a.id) == 10

    def test_exact_stock_sells_out(self, client, db_session, product_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale({"product_id": product_a.id, "quantity": 10}), headers=merchant_a_headers)
        assert resp.status_code == 201
        assert _stock(db_session, product_a.id) == 0

    def test_service_has_no_stock_limit(self, client, db_session, service_a, merchant_a_headers):
        resp = client.post("/api/sales", json=_sale({"product_id": service_a.id, "quantity": 500}), headers=merchant_a_headers)
        assert resp.status_code == 201
        assert resp.get_json()["total_amount"] == "12500.00"
        assert _stock(db_session, service_a.id) == 0

    def test_store_failure_rolls_back(self, app, db_session, merchant_a, business_a, product_a, monkeypatch):
        original = sales_service._decrement_stock

        def failing_decrement(products, priced):
            original(products, priced)
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(sales_service, "_decrement_stock", failing_decrement)

        request = SaleRequest(payment_method="cash", lines=[SaleLineRequest(product_id=product_a.id, quantity=4)])
        with pytest.raises(UnexpectedError):
            sales_service.create_sale(business_id=business_a.id, seller_id=merchant_a.id, request=request)

        assert _stock(db_session, product_a.id) == 10
        assert db_session.query(Sale).count() == 0

    def test_unexpected_error_over_http(self, client, db_session, product_a, merchant_a_headers, monkeypatch):
        def broken(products, priced):
            raise SQLAlchemyError("database is locked")

        monkeypatch.setattr(sales_service, "_decrement_stock", broken)

        resp = client.post("/api/sales", json=_sale({"product_id": product_a.id, "quantity": 1}), headers=merchant_a_headers)
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "UnexpectedError"
        assert db_session.query(Sale).count() == 0


class TestSaleQueries:

    def test_list_newest_first_with_items(self, client, db_session, product_a, service_a, merchant_a_headers):
        client.post("/api/sales", json=_sale({"product_id": product_a.id, "quantity": 1}), headers=merchant_a_headers)
        client.post("/api/sales", json=_sale({"product_id": service_a.id, "quantity": 1}), headers=merchant_a_headers)

        body = client.get("/api/sales", headers=merchant_a_headers).get_json()
        assert body["count"] == 2
        assert [s["total_amount"] for s in body["items"]] == ["25.00", "10.00"]
        assert body["items"][0]["items"][0]["product"]["name"] == "Delivery"

    def test_get_sale(self, client, db_session, product_a, merchant_a_headers):
        created = client.post("/api/sales", json=_sale({"product_id": product_a.id, "quantity": 2}), headers=merchant_a_headers).get_json()
        resp = client.get(f"/api/sales/{created['id']}", headers=merchant_a_headers)
        assert resp.status_code == 200
        assert resp.get_json()["total_amount"] == "20.00"


class TestConcurrentSales:
    """Concurrent sales against a shared file database."""

    @pytest.fixture
    def file_app(self, tmp_path):
        app = create_app({
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'concurrency.sqlite3'}",
            'SQLALCHEMY_ENGINE_OPTIONS': {"connect_args": {"timeout": 30}},
            'BCRYPT_ROUNDS': 4,
            'SUPER_ADMIN_BOOTSTRAP': False,
        })
        with app.app_context():
            db.create_all()
        yield app
        with app.app_context():
            db.drop_all()
            db.engine.dispose()

    def test_no_oversell_and_no_lost_updates(self, file_app):
        with file_app.app_context():
            merchant = provision_user(
                patch={"full_name": "Asha", "phone_number": "+255711000001", "business_name": "Asha Shop"},
                role=Role.MERCHANT,
                password="password123",
                created_by_id=None,
            )
            merchant_id = merchant.id
            business_id = db.session.query(Business.id).filter_by(owner_id=merchant_id).scalar()
            product = Product(business_id=business_id, name="Soda", price_cents=1000, stock_quantity=10)
            db.session.add(product)
            db.session.commit()
            product_id = product.id

        outcomes = []
        lock = threading.Lock()

        def sell():
            with file_app.app_context():
                request = SaleRequest(payment_method="cash", lines=[SaleLineRequest(product_id=product_id, quantity=2)])
                try:
                    sales_service.create_sale(business_id=business_id, seller_id=merchant_id, request=request)
                    result = "sold"
                except InsufficientStock:
                    result = "rejected"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=sell) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("sold") == 5
        assert outcomes.count("rejected") == 3

        with file_app.app_context():
            assert db.session.get(Product, product_id).stock_quantity == 0
            assert db.session.query(Sale).count() == 5
            sold_units = sum(item.quantity for item in db.session.query(SaleItem).all())
            assert sold_units == 10

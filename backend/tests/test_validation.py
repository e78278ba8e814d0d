# Overview: Pytest coverage for payload validation and money handling.

from datetime import date, datetime

import pytest

from dukapos.errors import ValidationError
from dukapos.models import Product
from dukapos.time_utils import day_window, parse_iso_date, previous_month_start
from dukapos.validation import (
    MAX_MONEY_CENTS,
    MAX_QUANTITY,
    ModelValidationPolicy,
    format_cents,
    parse_money_cents,
    require_positive_int,
    validate_payload,
)

POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "price", "stock_quantity", "is_active"},
    required_on_create={"name", "price"},
    money_fields={"price": "price_cents"},
)


class TestMoney:

    @pytest.mark.parametrize(
        "raw,cents",
        [
            ("30.00", 3000),
            ("30", 3000),
            (30, 3000),
            ("0.1", 10),
            (0.1, 10),
            (19.99, 1999),
            (" 5.5 ", 550),
            ("0", 0),
        ],
    )
    def test_parse(self, raw, cents):
        assert parse_money_cents(raw) == cents

    @pytest.mark.parametrize("raw", [None, True, "", "abc", "1.234", "-0.01", "NaN", "Infinity", [1]])
    def test_parse_rejects(self, raw):
        with pytest.raises(ValidationError):
            parse_money_cents(raw)

    def test_cap(self):
        assert parse_money_cents("9999999.99") == MAX_MONEY_CENTS
        with pytest.raises(ValidationError):
            parse_money_cents("10000000.00")

    @pytest.mark.parametrize("cents,text", [(3000, "30.00"), (5, "0.05"), (0, "0.00"), (-150, "-1.50"), (None, None)])
    def test_format(self, cents, text):
        assert format_cents(cents) == text


class TestValidatePayload:

    def test_create_maps_money_to_cents(self):
        patch = validate_payload(
            model=Product,
            payload={"name": "  Soda ", "price": "10.00", "stock_quantity": "4"},
            policy=POLICY,
            partial=False,
        )
        assert patch == {"name": "Soda", "price_cents": 1000, "stock_quantity": 4}

    def test_partial_only_validates_given_keys(self):
        patch = validate_payload(model=Product, payload={"is_active": "false"}, policy=POLICY, partial=True)
        assert patch == {"is_active": False}

    def test_blank_optional_text_becomes_null(self):
        patch = validate_payload(model=Product, payload={"description": ""}, policy=POLICY, partial=True)
        assert patch == {"description": None}

    @pytest.mark.parametrize(
        "payload",
        [
            {"business_id": "x"},
            {"price": None},
            {"name": None},
            {"name": "x" * 256},
            {"stock_quantity": "1e3"},
            {"stock_quantity": True},
            {"is_active": "maybe"},
            {"name": {"nested": True}},
        ],
    )
    def test_rejects(self, payload):
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload=payload, policy=POLICY, partial=True)

    def test_integer_columns_are_bounded(self):
        with pytest.raises(ValidationError, match="stock_quantity cannot exceed"):
            validate_payload(model=Product, payload={"stock_quantity": 10**19}, policy=POLICY, partial=True)
        assert validate_payload(
            model=Product, payload={"stock_quantity": MAX_QUANTITY}, policy=POLICY, partial=True
        ) == {"stock_quantity": MAX_QUANTITY}

    def test_non_dict_payload(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload=["name"], policy=POLICY, partial=True)


class TestPositiveInt:

    @pytest.mark.parametrize("raw,value", [(1, 1), ("3", 3), (" 7 ", 7), (MAX_QUANTITY, MAX_QUANTITY)])
    def test_accepts(self, raw, value):
        assert require_positive_int(raw, "quantity") == value

    @pytest.mark.parametrize("raw", [0, -1, 1.5, "1.5", True, None, "two", MAX_QUANTITY + 1, 10**19, "10000000000000000000"])
    def test_rejects(self, raw):
        with pytest.raises(ValidationError):
            require_positive_int(raw, "quantity")


class TestTimeHelpers:

    def test_day_window_is_half_open(self):
        start, end = day_window(datetime(2026, 3, 10, 23, 59, 59))
        assert start == datetime(2026, 3, 10)
        assert end == datetime(2026, 3, 11)

    def test_previous_month_start_across_year(self):
        assert previous_month_start(datetime(2026, 1, 15)) == datetime(2025, 12, 1)

    def test_parse_iso_date(self):
        assert parse_iso_date(None) is None
        assert parse_iso_date(" ") is None
        assert parse_iso_date("2026-03-02") == date(2026, 3, 2)
        assert parse_iso_date("2026-03-02T10:00:00") == date(2026, 3, 2)
        with pytest.raises(ValueError):
            parse_iso_date("March")

# Overview: Pytest coverage for product payload validation.

import pytest

from dukan.models import Product
from dukan.routes.products import PRODUCT_POLICY
from dukan.validation import ValidationError, enforce_rules_product, validate_payload


VALID = {
    "productNumber": " ABC-1 ",
    "name": "Widget",
    "category": "Tools",
    "costPrice": 10,
    "retailPrice": "15.50",
    "stock": 5,
}


class TestValidatePayload:
    def test_create_maps_client_fields_to_columns(self, app):
        patch = validate_payload(model=Product, payload=VALID, policy=PRODUCT_POLICY, partial=False)
        assert patch == {
            "product_number": "ABC-1",
            "name": "Widget",
            "category": "Tools",
            "cost_price_cents": 1000,
            "retail_price_cents": 1550,
            "stock": 5,
        }

    def test_missing_required_fields(self, app):
        payload = {k: v for k, v in VALID.items() if k != "category"}
        with pytest.raises(ValidationError, match="category"):
            validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)

    def test_partial_skips_required_check(self, app):
        patch = validate_payload(model=Product, payload={"stock": "7"}, policy=PRODUCT_POLICY, partial=True)
        assert patch == {"stock": 7}

    def test_unknown_field_rejected(self, app):
        with pytest.raises(ValidationError, match="Field not allowed"):
            validate_payload(model=Product, payload={"id": 3}, policy=PRODUCT_POLICY, partial=True)

    @pytest.mark.parametrize("stock", [1.5, "1e3", "2.0", True, "x"])
    def test_stock_must_be_integer(self, app, stock):
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload={"stock": stock}, policy=PRODUCT_POLICY, partial=True)

    def test_price_must_be_number(self, app):
        with pytest.raises(ValidationError, match="costPrice must be a number"):
            validate_payload(model=Product, payload={"costPrice": "ten"}, policy=PRODUCT_POLICY, partial=True)

    def test_blank_name_rejected(self, app):
        with pytest.raises(ValidationError, match="name cannot be blank"):
            validate_payload(model=Product, payload={"name": "   "}, policy=PRODUCT_POLICY, partial=True)


class TestProductRules:
    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError, match="retailPrice must be >= 0"):
            enforce_rules_product({"retail_price_cents": -1})

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="stock must be >= 0"):
            enforce_rules_product({"stock": -1})

    def test_retail_below_cost_is_allowed(self):
        enforce_rules_product({"cost_price_cents": 2000, "retail_price_cents": 1000})

    def test_stock_is_bounded(self):
        enforce_rules_product({"stock": 1_000_000})
        with pytest.raises(ValidationError, match="stock cannot exceed"):
            enforce_rules_product({"stock": 1_000_001})

# Overview: Pytest coverage for the inventory ledger service.

import pytest

from dukan.extensions import db
from dukan.models import Product
from dukan.services import inventory_service
from dukan.services.inventory_service import InsufficientStockError, ProductNotFoundError
from dukan.validation import ConflictError


def _patch(**overrides):
    patch = {
        "product_number": "ABC-1",
        "name": "Widget",
        "category": "Tools",
        "cost_price_cents": 1000,
        "retail_price_cents": 1500,
        "stock": 5,
    }
    patch.update(overrides)
    return patch


class TestCreateProduct:
    def test_create_applies_defaults(self, db_session):
        product = inventory_service.create_product(patch=_patch())
        assert product.id is not None
        assert product.wholesale_price_cents == 0
        assert product.unit == "pcs"

    def test_duplicate_product_number(self, db_session):
        inventory_service.create_product(patch=_patch())
        with pytest.raises(ConflictError, match="Product Number"):
            inventory_service.create_product(patch=_patch(name="Other"))

    def test_duplicate_name(self, db_session):
        inventory_service.create_product(patch=_patch())
        with pytest.raises(ConflictError, match="name"):
            inventory_service.create_product(patch=_patch(product_number="XYZ-9"))

    def test_name_uniqueness_is_case_sensitive(self, db_session):
        inventory_service.create_product(patch=_patch())
        product = inventory_service.create_product(patch=_patch(product_number="XYZ-9", name="WIDGET"))
        assert product.name == "WIDGET"


class TestDecrementStock:
    def test_decrements(self, db_session, make_product):
        product = make_product(stock=5)
        updated = inventory_service.decrement_stock(product.id, 3)
        db_session.commit()
        assert updated.stock == 2

    def test_insufficient_stock_names_product(self, db_session, make_product):
        product = make_product(stock=2, name="Tea")
        with pytest.raises(InsufficientStockError) as excinfo:
            inventory_service.decrement_stock(product.id, 3)
        db_session.rollback()
        assert "Tea" in str(excinfo.value)
        assert excinfo.value.details["available"] == 2
        assert db_session.get(Product, product.id).stock == 2

    def test_exact_stock_reaches_zero(self, db_session, make_product):
        product = make_product(stock=4)
        assert inventory_service.decrement_stock(product.id, 4).stock == 0

    def test_missing_product(self, db_session):
        with pytest.raises(ProductNotFoundError):
            inventory_service.decrement_stock(12345, 1)

    @pytest.mark.parametrize("product_id", [0, -1, 10**30])
    def test_out_of_range_id_is_not_found(self, db_session, product_id):
        with pytest.raises(ProductNotFoundError):
            inventory_service.find_by_id(product_id)
        assert inventory_service.delete_product(product_id=product_id) is False


class TestListAndSearch:
    def test_list_newest_first(self, db_session, make_product):
        first = make_product()
        second = make_product()
        ids = [p.id for p in inventory_service.list_products()]
        assert ids == [second.id, first.id]
        ids_asc = [p.id for p in inventory_service.list_products(sort="asc")]
        assert ids_asc == [first.id, second.id]

    def test_search_is_case_insensitive_substring(self, db_session, make_product):
        make_product(product_number="RICE-5KG")
        make_product(product_number="OIL-1L")
        found = inventory_service.search_products("ice")
        assert [p.product_number for p in found] == ["RICE-5KG"]

    def test_search_treats_wildcards_literally(self, db_session, make_product):
        make_product(product_number="A_1")
        make_product(product_number="AB1")
        found = inventory_service.search_products("a_")
        assert [p.product_number for p in found] == ["A_1"]

    def test_search_no_match_is_empty(self, db_session, make_product):
        make_product(product_number="RICE-5KG")
        assert inventory_service.search_products("zzz") == []


class TestUpdateAndDelete:
    def test_update_prices_and_stock(self, db_session, make_product):
        product = make_product(stock=1)
        updated = inventory_service.update_product(
            product_id=product.id,
            patch={"cost_price_cents": 1100, "retail_price_cents": 1700, "stock": 20},
        )
        assert (updated.cost_price_cents, updated.retail_price_cents, updated.stock) == (1100, 1700, 20)

    def test_update_rename_collision(self, db_session, make_product):
        make_product(name="Taken")
        product = make_product()
        with pytest.raises(ConflictError):
            inventory_service.update_product(product_id=product.id, patch={"name": "Taken"})

    def test_update_keeping_own_number_is_fine(self, db_session, make_product):
        product = make_product(product_number="KEEP-1")
        updated = inventory_service.update_product(
            product_id=product.id, patch={"product_number": "KEEP-1", "stock": 3}
        )
        assert updated.stock == 3

    def test_update_missing(self, db_session):
        with pytest.raises(ProductNotFoundError):
            inventory_service.update_product(product_id=999, patch={"stock": 1})

    def test_delete_is_hard(self, db_session, make_product):
        product = make_product()
        product_id = product.id
        assert inventory_service.delete_product(product_id=product_id) is True
        assert db.session.get(Product, product_id) is None
        assert inventory_service.delete_product(product_id=product_id) is False

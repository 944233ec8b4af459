"""Tests for the in-memory product repository."""
from datetime import datetime, timezone

import pytest

from app.models.product import Product
from app.schemas.product import ProductDraft
from app.services import product_repository as repo
from app.services.product_repository import (
    ProductConflictError,
    ProductNotFoundError,
    ProductValidationError,
)

CREATED = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_product(product_id, name, price=10.0, stock=5, category="Tools", supplier="Acme"):
    return Product(
        id=product_id,
        name=name,
        category=category,
        price=price,
        stock=stock,
        supplier=supplier,
        created_at=CREATED,
        updated_at=CREATED,
    )


def draft(**overrides):
    data = {
        "name": "Widget",
        "category": "Parts",
        "price": 4.5,
        "stock": 12,
        "supplier": "Widget Works",
    }
    data.update(overrides)
    return data


class TestNextId:
    """Test: id assignment"""

    def test_empty_collection(self):
        assert repo.next_id([]) == 1

    def test_max_plus_one(self):
        products = [make_product(5, "Five"), make_product(2, "Two")]

        assert repo.next_id(products) == 6

    def test_last_issued_wins_when_higher(self):
        assert repo.next_id([make_product(2, "Two")], last_issued=9) == 10


class TestFindAndSearch:
    """Test: lookups"""

    def test_find_by_id(self):
        products = [make_product(1, "Hammer"), make_product(2, "Saw")]

        assert repo.find_by_id(products, 2).name == "Saw"
        assert repo.find_by_id(products, 3) is None

    def test_search_empty_term_returns_everything(self):
        products = [make_product(2, "Saw"), make_product(1, "Hammer")]

        assert repo.search(products, "") == products
        assert repo.search(products, None) == products
        assert repo.search(products, "   ") == products

    def test_search_matches_name_category_supplier(self):
        products = [
            make_product(1, "Claw Hammer", category="Tools", supplier="Acme"),
            make_product(2, "Rose Bush", category="Garden", supplier="Green Co"),
            make_product(3, "Trowel", category="Garden Tools", supplier="Acme"),
        ]

        assert [p.id for p in repo.search(products, "HAMMER")] == [1]
        assert [p.id for p in repo.search(products, "garden")] == [2, 3]
        assert [p.id for p in repo.search(products, "acme")] == [1, 3]
        assert repo.search(products, "drill") == []


class TestCreate:
    """Test: product creation"""

    def test_create_then_find(self):
        products = []

        created = repo.create(products, draft())

        found = repo.find_by_id(products, created.id)
        assert found == created
        assert created.id == 1
        assert created.model_dump(include={"name", "category", "price", "stock", "supplier"}) == draft()
        assert created.created_at == created.updated_at
        assert created.created_at.tzinfo is not None

    def test_create_appends_in_order(self):
        products = [make_product(1, "Hammer")]

        repo.create(products, draft(name="Saw"))

        assert [p.name for p in products] == ["Hammer", "Saw"]

    def test_create_accepts_validated_draft(self):
        products = []

        created = repo.create(products, ProductDraft(**draft()))

        assert created.name == "Widget"

    def test_create_uses_last_issued(self):
        products = [make_product(1, "Hammer")]

        created = repo.create(products, draft(), last_issued=4)

        assert created.id == 5

    def test_duplicate_name_case_insensitive(self):
        products = []
        repo.create(products, draft(name="Widget"))

        with pytest.raises(ProductConflictError):
            repo.create(products, draft(name="WIDGET"))

        assert len(products) == 1

    @pytest.mark.parametrize("overrides, field", [
        ({"price": 0}, "price"),
        ({"price": "abc"}, "price"),
        ({"stock": -1}, "stock"),
        ({"stock": 1.5}, "stock"),
        ({"name": " "}, "name"),
        ({"category": ""}, "category"),
        ({"supplier": "A"}, "supplier"),
        ({"price": True}, "price"),
        ({"stock": False}, "stock"),
        ({"price": 1e308}, "price"),
        ({"stock": 10**12}, "stock"),
    ])
    def test_invalid_draft(self, overrides, field):
        products = []

        with pytest.raises(ProductValidationError) as exc_info:
            repo.create(products, draft(**overrides))

        assert [e.field for e in exc_info.value.errors] == [field]
        assert products == []

    def test_missing_fields(self):
        with pytest.raises(ProductValidationError) as exc_info:
            repo.create([], {"name": "Widget"})

        assert {e.field for e in exc_info.value.errors} == {"category", "price", "stock", "supplier"}


class TestUpdate:
    """Test: product updates"""

    def test_update_replaces_fields(self):
        products = [make_product(1, "Hammer"), make_product(2, "Saw")]

        updated = repo.update(products, 2, draft(name="Hand Saw", stock=0))

        assert updated.id == 2
        assert updated.name == "Hand Saw"
        assert updated.stock == 0
        assert updated.created_at == CREATED
        assert updated.updated_at > CREATED
        assert products[1] is updated

    def test_update_keeps_own_name(self):
        products = [make_product(1, "Hammer")]

        updated = repo.update(products, 1, draft(name="HAMMER"))

        assert updated.name == "HAMMER"

    def test_update_not_found_leaves_collection(self):
        products = [make_product(1, "Hammer")]
        snapshot = list(products)

        with pytest.raises(ProductNotFoundError):
            repo.update(products, 99, draft())

        assert products == snapshot

    def test_update_conflict(self):
        products = [make_product(1, "Hammer"), make_product(2, "Saw")]

        with pytest.raises(ProductConflictError):
            repo.update(products, 2, draft(name="hammer"))

        assert products[1].name == "Saw"

    def test_update_invalid(self):
        products = [make_product(1, "Hammer")]

        with pytest.raises(ProductValidationError):
            repo.update(products, 1, draft(price=-3))


class TestDelete:
    """Test: product removal"""

    def test_delete_returns_removed(self):
        products = [make_product(1, "Hammer"), make_product(2, "Saw"), make_product(3, "Drill")]

        removed = repo.delete(products, 2)

        assert removed.name == "Saw"
        assert [p.id for p in products] == [1, 3]

    def test_delete_lowers_total_products(self):
        products = [make_product(1, "Hammer"), make_product(2, "Saw")]
        before = repo.statistics(products).total_products

        repo.delete(products, 1)

        assert repo.statistics(products).total_products == before - 1

    def test_delete_not_found(self):
        products = [make_product(1, "Hammer")]

        with pytest.raises(ProductNotFoundError):
            repo.delete(products, 7)

        assert len(products) == 1


class TestStatistics:
    """Test: aggregate figures"""

    def test_scenario(self):
        products = [
            make_product(1, "A", price=10, stock=5),
            make_product(2, "B", price=20, stock=0),
        ]

        stats = repo.statistics(products)

        assert stats.total_products == 2
        assert stats.total_stock == 5
        assert stats.total_value == 50
        assert stats.categories == 1
        assert stats.low_stock_products == 2

    def test_empty(self):
        stats = repo.statistics([])

        assert stats.total_products == 0
        assert stats.total_value == 0
        assert stats.categories == 0

    def test_distinct_categories_and_threshold(self):
        products = [
            make_product(1, "Hammer", stock=10, category="Tools"),
            make_product(2, "Rake", stock=3, category="Garden"),
            make_product(3, "Saw", stock=30, category="Tools"),
        ]

        assert repo.statistics(products).categories == 2
        assert repo.statistics(products).low_stock_products == 1
        assert repo.statistics(products, low_stock_threshold=11).low_stock_products == 2

    def test_serialized_with_camel_case(self):
        data = repo.statistics([make_product(1, "Hammer")]).model_dump(by_alias=True)

        assert set(data) == {"totalProducts", "totalStock", "totalValue", "categories", "lowStockProducts"}

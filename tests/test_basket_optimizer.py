"""Tests for basket optimization."""

from decimal import Decimal

import pytest

from pricecomparator.catalog import InMemoryCatalog
from pricecomparator.core.exceptions import InvalidInputError
from pricecomparator.services.basket_optimizer import BasketOptimizer
from pricecomparator.services.offer_evaluator import OfferEvaluator


@pytest.fixture
def two_store_catalog(make_product, make_discount):
    """Milk is cheaper at Kaufland, bread at Lidl, eggs only at Lidl."""
    return InMemoryCatalog(
        products=[
            make_product(product_id="P001", name="Milk", store_name="Lidl", price=Decimal("6.00")),
            make_product(product_id="P001", name="Milk", store_name="Kaufland", price=Decimal("5.50")),
            make_product(product_id="P002", name="Bread", store_name="Lidl", price=Decimal("4.00")),
            make_product(product_id="P002", name="Bread", store_name="Kaufland", price=Decimal("4.00")),
            make_product(product_id="P003", name="Eggs", store_name="Lidl", price=Decimal("12.00")),
        ],
        discounts=[
            make_discount(product_id="P002", name="Bread", store_name="Kaufland", percentage=25),
        ],
    )


class _PartlyBrokenCatalog(InMemoryCatalog):
    """Catalog that loses the product record behind Bread's discount."""

    def latest_product_by_id(self, product_id, store):
        if product_id == "P002":
            return None
        return super().latest_product_by_id(product_id, store)


class TestOptimizeBasket:
    """Tests for BasketOptimizer.optimize_basket."""

    def test_returns_one_offer_per_found_product(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        offers = optimizer.optimize_basket(["Milk", "Bread"])

        assert [o.name for o in offers] == ["Milk", "Bread"]
        assert offers[0].store_name == "Kaufland"
        assert offers[1].store_name == "Kaufland"
        assert offers[1].discounted_price == Decimal("3.00")

    def test_missing_product_is_omitted(self, make_product, clock):
        catalog = InMemoryCatalog([
            make_product(name="Milk", store_name="Lidl"),
            make_product(name="Milk", store_name="Kaufland"),
        ])
        optimizer = BasketOptimizer(OfferEvaluator(catalog, clock=clock))

        offers = optimizer.optimize_basket(["Milk", "Bread"])

        assert len(offers) == 1
        assert offers[0].name == "Milk"

    def test_empty_basket(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        assert optimizer.optimize_basket([]) == []

    def test_blank_name_rejects_basket(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        with pytest.raises(InvalidInputError):
            optimizer.optimize_basket(["Milk", " "])

    def test_thread_pool_keeps_input_order(self, two_store_catalog, clock):
        names = ["Eggs", "Milk", "Bread", "Caviar", "Milk"]
        sequential = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock), max_workers=1)
        pooled = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock), max_workers=4)

        assert pooled.optimize_basket(names) == sequential.optimize_basket(names)
        assert [o.name for o in pooled.optimize_basket(names)] == ["Eggs", "Milk", "Bread", "Milk"]


class TestEvaluateBasket:
    """Tests for BasketOptimizer.evaluate_basket reporting."""

    def test_reports_not_found_separately(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        report = optimizer.evaluate_basket(["Milk", "Caviar"])

        assert [o.name for o in report.offers] == ["Milk"]
        assert report.not_found == ["Caviar"]
        assert report.errors == {}

    def test_inconsistent_item_does_not_abort_basket(self, two_store_catalog, clock):
        catalog = _PartlyBrokenCatalog(two_store_catalog._products, two_store_catalog._discounts)
        optimizer = BasketOptimizer(OfferEvaluator(catalog, clock=clock))

        report = optimizer.evaluate_basket(["Milk", "Bread", "Eggs"])

        assert [o.name for o in report.offers] == ["Milk", "Eggs"]
        assert report.not_found == []
        assert "Bread" in report.errors
        assert "P002" in report.errors["Bread"]

    def test_optimize_drops_inconsistent_item_that_report_keeps(self, two_store_catalog, clock):
        catalog = _PartlyBrokenCatalog(two_store_catalog._products, two_store_catalog._discounts)
        optimizer = BasketOptimizer(OfferEvaluator(catalog, clock=clock))

        offers = optimizer.optimize_basket(["Milk", "Bread", "Caviar"])
        report = optimizer.evaluate_basket(["Milk", "Bread", "Caviar"])

        assert [o.name for o in offers] == ["Milk"]
        assert list(optimizer.group_by_store(["Bread"])) == []
        assert report.not_found == ["Caviar"]
        assert list(report.errors) == ["Bread"]

    def test_total(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        report = optimizer.evaluate_basket(["Milk", "Bread", "Eggs"])

        assert report.total == Decimal("20.50")


class TestGroupByStore:
    """Tests for BasketOptimizer.group_by_store."""

    def test_groups_preserve_product_order(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        groups = optimizer.group_by_store(["Eggs", "Milk", "Bread"])

        assert set(groups) == {"Lidl", "Kaufland"}
        assert [o.name for o in groups["Kaufland"]] == ["Milk", "Bread"]
        assert [o.name for o in groups["Lidl"]] == ["Eggs"]

    def test_empty_when_nothing_found(self, two_store_catalog, clock):
        optimizer = BasketOptimizer(OfferEvaluator(two_store_catalog, clock=clock))

        assert optimizer.group_by_store(["Caviar"]) == {}

"""Tests for discount analytics and price alert evaluation."""

from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import TODAY
from pricecomparator.catalog import InMemoryCatalog
from pricecomparator.core.exceptions import DataInconsistencyError, InvalidInputError
from pricecomparator.schemas import PriceAlert
from pricecomparator.services.alert_service import AlertService
from pricecomparator.services.discount_analytics import DiscountAnalyticsService
from pricecomparator.services.offer_evaluator import OfferEvaluator


@pytest.fixture
def catalog(make_product, make_discount):
    return InMemoryCatalog(
        products=[
            make_product(product_id="P001", name="lapte zuzu", store_name="Lidl", price=Decimal("10")),
            make_product(product_id="P002", name="paine alba", store_name="Lidl", price=Decimal("4")),
            make_product(product_id="P003", name="cafea", store_name="Profi", price=Decimal("30")),
        ],
        discounts=[
            make_discount(product_id="P001", name="lapte zuzu", percentage=10, date_added=TODAY),
            make_discount(
                product_id="P002",
                name="paine alba",
                percentage=40,
                date_added=TODAY - timedelta(days=1),
            ),
            make_discount(
                product_id="P003",
                name="cafea",
                store_name="Profi",
                percentage=25,
                date_added=TODAY - timedelta(days=5),
            ),
            make_discount(
                product_id="P003",
                name="cafea",
                store_name="Profi",
                percentage=60,
                date_from=TODAY - timedelta(days=30),
                date_to=TODAY - timedelta(days=20),
                date_added=TODAY - timedelta(days=30),
            ),
        ],
    )


# ============================================================================
# TESTS: DISCOUNT ANALYTICS
# ============================================================================

class TestDiscountAnalytics:
    """Tests for DiscountAnalyticsService."""

    def test_current_discounts_only_active(self, catalog, clock):
        service = DiscountAnalyticsService(catalog, clock=clock)

        offers = service.current_discounts()

        assert [o.product_id for o in offers] == ["P001", "P002", "P003"]
        assert offers[2].discounted_price == Decimal("22.50")

    def test_new_discounts_within_window(self, catalog, clock):
        service = DiscountAnalyticsService(catalog, clock=clock, new_window_days=1)

        offers = service.new_discounts()

        assert [o.product_id for o in offers] == ["P001", "P002"]

    def test_wider_window_picks_up_older_discounts(self, catalog, clock):
        service = DiscountAnalyticsService(catalog, clock=clock, new_window_days=7)

        assert [o.product_id for o in service.new_discounts()] == ["P001", "P002", "P003"]

    def test_top_discounts_by_percentage(self, catalog, clock):
        service = DiscountAnalyticsService(catalog, clock=clock)

        top = service.top_discounts(limit=2)

        assert [o.discount_percentage for o in top] == [40, 25]

    def test_top_discounts_rejects_non_positive_limit(self, catalog, clock):
        service = DiscountAnalyticsService(catalog, clock=clock)

        with pytest.raises(InvalidInputError, match="limit"):
            service.top_discounts(limit=0)

    def test_discount_for_unknown_product_is_inconsistent(self, make_product, make_discount, clock):
        catalog = InMemoryCatalog(
            products=[make_product(product_id="P001")],
            discounts=[make_discount(product_id="P999", name="ghost")],
        )
        service = DiscountAnalyticsService(catalog, clock=clock)

        with pytest.raises(DataInconsistencyError, match="P999"):
            service.current_discounts()


# ============================================================================
# TESTS: PRICE ALERTS
# ============================================================================

class TestAlertService:
    """Tests for AlertService."""

    def test_create_alert_stamps_today(self, catalog, clock):
        service = AlertService(OfferEvaluator(catalog, clock=clock), clock=clock)

        alert = service.create_alert(" cafea ", "25", "ana@example.com")

        assert alert.product_name == "cafea"
        assert alert.target_price == Decimal("25")
        assert alert.notified is False
        assert alert.created_at == TODAY

    def test_triggers_when_price_at_or_below_target(self, catalog, clock):
        service = AlertService(OfferEvaluator(catalog, clock=clock), clock=clock)
        alerts = [
            PriceAlert(product_name="lapte zuzu", target_price=Decimal("9.00"), user_email="a@example.com"),
            PriceAlert(product_name="cafea", target_price=Decimal("20.00"), user_email="b@example.com"),
            PriceAlert(product_name="caviar", target_price=Decimal("100"), user_email="c@example.com"),
        ]

        triggered = service.check_alerts(alerts)

        assert [a.product_name for a in triggered] == ["lapte zuzu"]
        assert triggered[0].notified is True
        assert alerts[0].notified is False

    def test_already_notified_alerts_are_skipped(self, catalog, clock):
        service = AlertService(OfferEvaluator(catalog, clock=clock), clock=clock)
        alert = PriceAlert(
            product_name="paine alba",
            target_price=Decimal("5"),
            user_email="a@example.com",
            notified=True,
        )

        assert service.check_alerts([alert]) == []

    def test_notifier_called_for_each_triggered_alert(self, catalog, clock):
        calls = []
        service = AlertService(
            OfferEvaluator(catalog, clock=clock),
            notifier=lambda alert, offer: calls.append((alert.user_email, offer.discounted_price)),
            clock=clock,
        )
        alerts = [
            PriceAlert(product_name="paine alba", target_price=Decimal("3"), user_email="a@example.com"),
            PriceAlert(product_name="cafea", target_price=Decimal("25"), user_email="b@example.com"),
        ]

        service.check_alerts(alerts)

        assert calls == [("a@example.com", Decimal("2.40")), ("b@example.com", Decimal("22.50"))]

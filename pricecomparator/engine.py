"""Price engine facade.

Wires every service to one catalog and one configuration so callers
(an HTTP layer, a scheduler, a script) need a single object:

    engine = PriceEngine(InMemoryCatalog(products, discounts))
    engine.get_best_offer("lapte zuzu")
    engine.group_by_store(["lapte zuzu", "paine alba"])
    engine.get_price_history("lapte zuzu", {"store": "Lidl"})
"""

from datetime import date
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

from pricecomparator.catalog.base import CatalogReader
from pricecomparator.config import Settings, settings
from pricecomparator.schemas.history import HistoryFilter, PriceHistorySegment
from pricecomparator.schemas.offer import BasketReport, Offer
from pricecomparator.services.alert_service import AlertNotifier, AlertService
from pricecomparator.services.basket_optimizer import BasketOptimizer
from pricecomparator.services.discount_analytics import DiscountAnalyticsService
from pricecomparator.services.normalizer import PriceNormalizer, rates_from_settings
from pricecomparator.services.offer_evaluator import OfferEvaluator
from pricecomparator.services.price_history import PriceHistoryService


class PriceEngine:
    """Entry point bundling offer, basket, history, analytics and alert services."""

    def __init__(
        self,
        catalog: CatalogReader,
        config: Settings = settings,
        clock: Callable[[], date] = date.today,
        notifier: Optional[AlertNotifier] = None,
    ):
        self.catalog = catalog
        self.config = config
        self.normalizer = PriceNormalizer(rates_from_settings(config))

        self.offers = OfferEvaluator(catalog, self.normalizer, clock)
        self.basket = BasketOptimizer(self.offers, max_workers=config.BASKET_MAX_WORKERS)
        self.history = PriceHistoryService(catalog, self.normalizer, clock)
        self.analytics = DiscountAnalyticsService(
            catalog,
            self.offers,
            clock,
            new_window_days=config.NEW_DISCOUNT_WINDOW_DAYS,
        )
        self.alerts = AlertService(self.offers, notifier, clock)

    def get_best_offer(self, product_name: str) -> Optional[Offer]:
        return self.offers.get_best_offer(product_name)

    def optimize_basket(self, product_names: Sequence[str]) -> List[Offer]:
        return self.basket.optimize_basket(product_names)

    def evaluate_basket(self, product_names: Sequence[str]) -> BasketReport:
        return self.basket.evaluate_basket(product_names)

    def group_by_store(self, product_names: Sequence[str]) -> Dict[str, List[Offer]]:
        return self.basket.group_by_store(product_names)

    def get_price_history(
        self,
        product_name: str,
        filters: Union[HistoryFilter, Mapping[str, Optional[str]], None] = None,
    ) -> List[PriceHistorySegment]:
        return self.history.get_price_history(product_name, filters)

"""Services implementing the price comparison logic.

Each service reads from a CatalogReader supplied by the caller and
returns derived values; none of them keeps state between calls.
"""

from pricecomparator.services.normalizer import PriceNormalizer
from pricecomparator.services.offer_evaluator import OfferEvaluator, PricingSnapshot
from pricecomparator.services.basket_optimizer import BasketOptimizer
from pricecomparator.services.price_history import PriceHistoryService, build_history_filter
from pricecomparator.services.discount_analytics import DiscountAnalyticsService
from pricecomparator.services.alert_service import AlertNotifier, AlertService

__all__ = [
    "PriceNormalizer",
    "OfferEvaluator",
    "PricingSnapshot",
    "BasketOptimizer",
    "PriceHistoryService",
    "build_history_filter",
    "DiscountAnalyticsService",
    "AlertNotifier",
    "AlertService",
]

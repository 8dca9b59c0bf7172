"""Discount analytics: what is on sale now, what is new, and the deepest cuts."""

from datetime import date, timedelta
from typing import Callable, List, Optional

import structlog

from pricecomparator.catalog.base import CatalogReader
from pricecomparator.core.exceptions import InvalidInputError
from pricecomparator.schemas.offer import Offer
from pricecomparator.services.offer_evaluator import OfferEvaluator

logger = structlog.get_logger(__name__)


class DiscountAnalyticsService:
    """Renders catalog discounts as offers against current product prices.

    Every discount is priced against the latest product record with the
    same product id at the same store. A discount without such a record
    raises DataInconsistencyError.
    """

    def __init__(
        self,
        catalog: CatalogReader,
        evaluator: Optional[OfferEvaluator] = None,
        clock: Callable[[], date] = date.today,
        new_window_days: int = 1,
    ):
        self.catalog = catalog
        self.evaluator = evaluator or OfferEvaluator(catalog, clock=clock)
        self.clock = clock
        self.new_window_days = max(0, new_window_days)
        self.logger = logger.bind(service="discount_analytics")

    def current_discounts(self) -> List[Offer]:
        """Offers for every discount active today, in catalog order."""
        today = self.clock()
        discounts = self.catalog.active_discounts(today)
        offers = [self.evaluator.offer_for_discount(d) for d in discounts]

        self.logger.info("current_discounts_listed", day=today.isoformat(), count=len(offers))
        return offers

    def new_discounts(self) -> List[Offer]:
        """Offers for discounts added today or within the configured window."""
        today = self.clock()
        days = [today - timedelta(days=offset) for offset in range(self.new_window_days + 1)]
        discounts = self.catalog.discounts_added_on(days)
        offers = [self.evaluator.offer_for_discount(d) for d in discounts]

        self.logger.info(
            "new_discounts_listed",
            since=days[-1].isoformat(),
            count=len(offers),
        )
        return offers

    def top_discounts(self, limit: int = 10) -> List[Offer]:
        """Active discounts with the highest percentage first.

        Equal percentages keep catalog order.

        Raises:
            InvalidInputError: If limit is not positive
        """
        if limit < 1:
            raise InvalidInputError("limit", "must be a positive integer")

        offers = sorted(
            self.current_discounts(),
            key=lambda offer: offer.discount_percentage,
            reverse=True,
        )
        return offers[:limit]

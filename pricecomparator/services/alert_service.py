"""Price alert evaluation.

Alerts are plain values supplied by the caller. This service decides
which of them fire against today's best offers; storing alerts and
delivering notifications stay with the caller.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

import structlog

from pricecomparator.core.exceptions import DataInconsistencyError
from pricecomparator.schemas.alert import PriceAlert
from pricecomparator.schemas.offer import Offer
from pricecomparator.services.normalizer import clean_product_name, to_decimal
from pricecomparator.services.offer_evaluator import OfferEvaluator

logger = structlog.get_logger(__name__)

# Called once per triggered alert with the offer that triggered it
AlertNotifier = Callable[[PriceAlert, Offer], None]


class AlertService:
    """Checks price alerts against the cheapest current offers."""

    def __init__(
        self,
        evaluator: OfferEvaluator,
        notifier: Optional[AlertNotifier] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.evaluator = evaluator
        self.notifier = notifier
        self.clock = clock
        self.logger = logger.bind(service="alert_service")

    def create_alert(self, product_name: str, target_price, user_email: str) -> PriceAlert:
        """Build a fresh, un-notified alert stamped with today's date."""
        return PriceAlert(
            product_name=clean_product_name(product_name),
            target_price=to_decimal(target_price),
            user_email=user_email,
            notified=False,
            created_at=self.clock(),
        )

    def check_alerts(self, alerts: Iterable[PriceAlert]) -> List[PriceAlert]:
        """Return the alerts whose product is now at or below its target price.

        Already notified alerts are ignored. Triggered alerts come back as
        copies with notified=True. An alert whose product has inconsistent
        catalog data is logged and skipped.
        """
        pending = [alert for alert in alerts if not alert.notified]
        if not pending:
            return []

        snapshot = self.evaluator.snapshot()
        triggered: List[PriceAlert] = []

        for alert in pending:
            try:
                offer = self.evaluator.best_offer_in(snapshot, alert.product_name)
            except DataInconsistencyError as e:
                self.logger.warning(
                    "alert_check_skipped",
                    product_name=alert.product_name,
                    error=e.message,
                )
                continue

            if offer is None or offer.discounted_price > Decimal(alert.target_price):
                continue

            fired = alert.model_copy(update={"notified": True})
            triggered.append(fired)

            self.logger.info(
                "price_alert_triggered",
                product_name=alert.product_name,
                target=str(alert.target_price),
                price=str(offer.discounted_price),
                store=offer.store_name,
            )

            if self.notifier is not None:
                self.notifier(fired, offer)

        return triggered

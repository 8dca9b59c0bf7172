"""Basket optimization: the cheapest store for every item on a shopping list."""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from pricecomparator.core.exceptions import DataInconsistencyError
from pricecomparator.schemas.offer import BasketReport, Offer
from pricecomparator.services.normalizer import clean_product_name
from pricecomparator.services.offer_evaluator import OfferEvaluator, PricingSnapshot

logger = structlog.get_logger(__name__)

_Outcome = Tuple[str, Optional[Offer], Optional[str]]


class BasketOptimizer:
    """Runs the offer evaluator over a list of product names.

    All items of one basket are evaluated against a single pricing
    snapshot. When the catalog is thread safe and more than one worker
    is allowed, items are evaluated on a thread pool; results always
    come back in input order.
    """

    def __init__(self, evaluator: OfferEvaluator, max_workers: int = 1):
        """Initialize the optimizer.

        Args:
            evaluator: Offer evaluator bound to a catalog
            max_workers: Thread pool width, 1 for sequential evaluation
        """
        self.evaluator = evaluator
        self.max_workers = max(1, max_workers)
        self.logger = logger.bind(service="basket_optimizer")

    def evaluate_basket(self, product_names: Sequence[str]) -> BasketReport:
        """Evaluate every basket item and report offers, misses and failures.

        A product no store carries is listed in not_found. A product whose
        evaluation hits inconsistent catalog data is listed in errors; it
        does not abort the rest of the basket.

        Raises:
            InvalidInputError: If any name is blank
        """
        names = [clean_product_name(name) for name in product_names]
        snapshot = self.evaluator.snapshot()

        def evaluate(name: str) -> _Outcome:
            return self._evaluate_item(snapshot, name)

        if self._use_pool(len(names)):
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as pool:
                outcomes = list(pool.map(evaluate, names))
        else:
            outcomes = [evaluate(name) for name in names]

        report = BasketReport()
        for name, offer, error in outcomes:
            if error is not None:
                report.errors[name] = error
            elif offer is None:
                report.not_found.append(name)
            else:
                report.offers.append(offer)

        self.logger.info(
            "basket_evaluated",
            items=len(names),
            offers=len(report.offers),
            not_found=len(report.not_found),
            errors=len(report.errors),
        )

        return report

    def optimize_basket(self, product_names: Sequence[str]) -> List[Offer]:
        """Best offer per product, in input order.

        Products nobody carries and products whose evaluation hit
        inconsistent catalog data are both left out; use evaluate_basket
        to tell the two apart.
        """
        return self.evaluate_basket(product_names).offers

    def group_by_store(self, product_names: Sequence[str]) -> Dict[str, List[Offer]]:
        """Best offers split into per-store shopping lists.

        Leaves out the same items optimize_basket does; evaluate_basket
        reports them separately.
        """
        return self.evaluate_basket(product_names).grouped_by_store()

    def _use_pool(self, item_count: int) -> bool:
        return (
            self.max_workers > 1
            and item_count > 1
            and getattr(self.evaluator.catalog, "thread_safe", False)
        )

    def _evaluate_item(self, snapshot: PricingSnapshot, name: str) -> _Outcome:
        try:
            return name, self.evaluator.best_offer_in(snapshot, name), None
        except DataInconsistencyError as e:
            self.logger.warning(
                "basket_item_inconsistent",
                product_name=name,
                product_id=e.product_id,
                store=e.store_name,
                error=e.message,
            )
            return name, None, e.message

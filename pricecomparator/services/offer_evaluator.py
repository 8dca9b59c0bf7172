"""Best-offer evaluation across stores.

For one product name the evaluator looks at the latest price record in
every store, applies the discount active today for that product and
store (if any), and keeps the cheapest resulting offer.
"""

from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

import structlog

from pricecomparator.catalog.base import CatalogReader
from pricecomparator.core.exceptions import DataInconsistencyError, NotFoundError
from pricecomparator.schemas.catalog import DiscountRecord, ProductRecord
from pricecomparator.schemas.offer import Offer
from pricecomparator.services.normalizer import PriceNormalizer, clean_product_name

logger = structlog.get_logger(__name__)

DiscountKey = Tuple[str, str]


def discount_key(product_id: str, store_name: str) -> DiscountKey:
    return product_id, store_name.lower()


def _preference(discount: DiscountRecord) -> tuple:
    # Newest import first, then deepest cut, then latest start
    return discount.date_added, discount.percentage, discount.date_from


def build_discount_lookup(discounts: Iterable[DiscountRecord]) -> Dict[DiscountKey, DiscountRecord]:
    """Index active discounts by (product_id, lowercased store).

    When several discounts share a key, the most recently added one
    wins; ties fall back to the higher percentage, then the later
    date_from. The result does not depend on input order.
    """
    lookup: Dict[DiscountKey, DiscountRecord] = {}
    for discount in discounts:
        key = discount_key(discount.product_id, discount.store_name)
        current = lookup.get(key)
        if current is None:
            lookup[key] = discount
            continue

        kept = max(current, discount, key=_preference)
        logger.debug(
            "duplicate_active_discount",
            product_id=discount.product_id,
            store=discount.store_name,
            kept_percentage=kept.percentage,
        )
        lookup[key] = kept
    return lookup


@dataclass(frozen=True)
class PricingSnapshot:
    """Read-only lookup tables for one evaluation request.

    Safe to share between worker threads: the store tuple and the
    discount mapping proxy cannot be mutated.
    """

    day: date
    stores: Tuple[str, ...]
    discounts: Mapping[DiscountKey, DiscountRecord]

    def discount_for(self, product_id: str, store_name: str) -> Optional[DiscountRecord]:
        return self.discounts.get(discount_key(product_id, store_name))


class OfferEvaluator:
    """Finds the cheapest current offer for a product across all stores."""

    def __init__(
        self,
        catalog: CatalogReader,
        normalizer: Optional[PriceNormalizer] = None,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize the evaluator.

        Args:
            catalog: Source of product and discount records
            normalizer: Currency/unit normalizer (default fixed RON rates)
            clock: Returns "today" for discount activity checks
        """
        self.catalog = catalog
        self.normalizer = normalizer or PriceNormalizer()
        self.clock = clock
        self.logger = logger.bind(service="offer_evaluator")

    def snapshot(self) -> PricingSnapshot:
        """Fetch the store list and today's active discounts once."""
        today = self.clock()
        stores = tuple(self.catalog.distinct_stores())
        lookup = build_discount_lookup(self.catalog.active_discounts(today))

        self.logger.debug(
            "pricing_snapshot_built",
            day=today.isoformat(),
            stores=len(stores),
            active_discounts=len(lookup),
        )

        return PricingSnapshot(day=today, stores=stores, discounts=MappingProxyType(lookup))

    def get_best_offer(self, product_name: str) -> Optional[Offer]:
        """Cheapest offer for a product, or None if no store carries it.

        Raises:
            InvalidInputError: If product_name is blank
            DataInconsistencyError: If an applicable discount has no product record
        """
        return self.best_offer_in(self.snapshot(), product_name)

    def require_best_offer(self, product_name: str) -> Offer:
        """Like get_best_offer but raises NotFoundError instead of returning None."""
        offer = self.get_best_offer(product_name)
        if offer is None:
            raise NotFoundError("Product", product_name)
        return offer

    def best_offer_in(self, snapshot: PricingSnapshot, product_name: str) -> Optional[Offer]:
        """Evaluate one product against a prepared snapshot.

        Stores are scanned in snapshot order and only a strictly lower
        price replaces the current best, so on a tie the first store wins.
        """
        product_name = clean_product_name(product_name)
        best: Optional[Offer] = None

        for store in snapshot.stores:
            product = self.catalog.latest_product_by_name(product_name, store)
            if product is None:
                continue

            discount = snapshot.discount_for(product.product_id, store)
            offer = (
                self.offer_for_discount(discount)
                if discount is not None
                else self.build_offer(product)
            )

            if best is None or offer.discounted_price < best.discounted_price:
                best = offer

        if best is None:
            self.logger.info("product_not_carried", product_name=product_name)
        else:
            self.logger.info(
                "best_offer_selected",
                product_name=product_name,
                store=best.store_name,
                price=str(best.discounted_price),
                discount=best.discount_percentage,
            )

        return best

    def offer_for_discount(self, discount: DiscountRecord) -> Offer:
        """Render a discount as an offer against the latest matching record.

        Raises:
            DataInconsistencyError: If the catalog has no record for the
                discount's product at its store
        """
        product = self.catalog.latest_product_by_id(discount.product_id, discount.store_name)
        if product is None:
            self.logger.error(
                "discount_without_product",
                product_id=discount.product_id,
                store=discount.store_name,
            )
            raise DataInconsistencyError(
                discount.product_id,
                discount.store_name,
                f"discount for '{discount.name}' predates any product record",
            )
        return self.build_offer(product, discount)

    def build_offer(self, product: ProductRecord, discount: Optional[DiscountRecord] = None) -> Offer:
        """Join a product record with an optional discount.

        The markdown is applied in the product's native currency before
        both prices are converted to RON.
        """
        n = self.normalizer
        percentage = discount.percentage if discount is not None else 0

        original = n.to_ron(product.price, product.currency)
        discounted = n.to_ron(n.apply_discount(product.price, percentage), product.currency)

        unit = n.normalize_unit(product.package_unit)
        quantity = n.normalize_quantity(product.package_unit, product.package_quantity)

        return Offer(
            name=product.name,
            brand=product.brand,
            product_id=product.product_id,
            category=product.category,
            store_name=product.store_name,
            original_price=n.round_price(original),
            discount_percentage=percentage,
            discounted_price=n.round_price(discounted),
            price_per_unit=n.round_price(discounted / quantity),
            unit=unit,
        )

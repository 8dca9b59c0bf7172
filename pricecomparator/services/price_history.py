"""Historical price timeline construction.

A product's price records in one store form back-to-back intervals:
each record is valid from its date_added until the next record's
date_added, and the latest one until today. Discounts that overlap an
interval slice it further, so the timeline becomes a gapless sequence
of half-open [date_from, date_to) segments that are either discounted
or at the list price.

Example (today = day 5, one record at 10 RON from day 0, 20% off on
days 2-4):

    [0, 2) 10.00  regular
    [2, 4)  8.00  discounted
    [4, 5) 10.00  regular
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from pricecomparator.catalog.base import CatalogReader, same_text
from pricecomparator.core.exceptions import InvalidInputError
from pricecomparator.schemas.catalog import DiscountRecord, ProductRecord
from pricecomparator.schemas.history import HistoryFilter, PriceHistorySegment
from pricecomparator.services.normalizer import PriceNormalizer, clean_product_name

logger = structlog.get_logger(__name__)


def build_history_filter(
    store: Optional[str] = None,
    category: Optional[str] = None,
    brand: Optional[str] = None,
) -> HistoryFilter:
    """Build a HistoryFilter, reporting bad values as InvalidInputError."""
    try:
        return HistoryFilter(store=store, category=category, brand=brand)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else "filters"
        raise InvalidInputError(field, error["msg"]) from e


class PriceHistoryService:
    """Builds a product's discount-aware price timeline per store."""

    def __init__(
        self,
        catalog: CatalogReader,
        normalizer: Optional[PriceNormalizer] = None,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize the service.

        Args:
            catalog: Source of product and discount records
            normalizer: Currency normalizer (default fixed RON rates)
            clock: Returns "today", the end of every open interval
        """
        self.catalog = catalog
        self.normalizer = normalizer or PriceNormalizer()
        self.clock = clock
        self.logger = logger.bind(service="price_history")

    def get_price_history(
        self,
        product_name: str,
        filters: Union[HistoryFilter, Mapping[str, Optional[str]], None] = None,
    ) -> List[PriceHistorySegment]:
        """Price timeline of a product, optionally narrowed by store, category or brand.

        Segments are contiguous and non-overlapping within each store and
        cover [first date_added, today). Records added after today, and
        records superseded on the day they were added, contribute no
        segment. No ordering is promised across stores.

        Args:
            product_name: Product name, matched case-insensitively
            filters: HistoryFilter or a mapping with store/category/brand keys

        Returns:
            List of PriceHistorySegment, empty if nothing matches

        Raises:
            InvalidInputError: If the name or a filter value is malformed
        """
        product_name = clean_product_name(product_name)
        filters = self._coerce_filters(filters)
        today = self.clock()

        records = self.catalog.filtered_product_history(
            product_name,
            store=filters.store,
            category=filters.category,
            brand=filters.brand,
        )
        if not records:
            self.logger.info("price_history_empty", product_name=product_name)
            return []

        discounts = self.catalog.discounts_by_name(product_name)

        history: List[PriceHistorySegment] = []
        for store_key, store_records in self._group_by_store(records).items():
            store_discounts = [d for d in discounts if same_text(d.store_name, store_key)]
            history.extend(self._store_timeline(store_records, store_discounts, today))

        self.logger.info(
            "price_history_built",
            product_name=product_name,
            records=len(records),
            discounts=len(discounts),
            segments=len(history),
        )

        return history

    @staticmethod
    def _coerce_filters(filters) -> HistoryFilter:
        if filters is None:
            return HistoryFilter()
        if isinstance(filters, HistoryFilter):
            return filters
        if not isinstance(filters, Mapping):
            raise InvalidInputError("filters", "expected a HistoryFilter or a mapping")

        unknown = set(filters) - {"store", "category", "brand"}
        if unknown:
            raise InvalidInputError("filters", f"unknown filter keys: {', '.join(sorted(unknown))}")
        return build_history_filter(**filters)

    @staticmethod
    def _group_by_store(records: List[ProductRecord]) -> Dict[str, List[ProductRecord]]:
        # Dicts keep first-seen order, and each group stays chronological
        grouped: Dict[str, List[ProductRecord]] = {}
        for record in records:
            grouped.setdefault(record.store_name.lower(), []).append(record)
        return grouped

    def _store_timeline(
        self,
        records: List[ProductRecord],
        discounts: List[DiscountRecord],
        today: date,
    ) -> List[PriceHistorySegment]:
        segments: List[PriceHistorySegment] = []

        for i, record in enumerate(records):
            interval_from = record.date_added
            interval_to = records[i + 1].date_added if i + 1 < len(records) else today
            interval_to = min(interval_to, today)

            # Superseded the same day, or added on or after today
            if interval_from >= interval_to:
                self.logger.debug(
                    "price_record_skipped",
                    product_id=record.product_id,
                    store=record.store_name,
                    date_added=record.date_added.isoformat(),
                )
                continue

            overlapping = sorted(
                (
                    d for d in discounts
                    if d.date_to >= interval_from and d.date_from <= interval_to
                ),
                key=lambda d: (d.date_from, d.date_to),
            )

            segments.extend(self._slice_interval(record, interval_from, interval_to, overlapping))

        return segments

    def _slice_interval(
        self,
        record: ProductRecord,
        interval_from: date,
        interval_to: date,
        overlapping: List[DiscountRecord],
    ) -> List[PriceHistorySegment]:
        """Split one record's non-empty validity interval around the discounts that touch it."""
        original = self.normalizer.to_ron(record.price, record.currency)
        regular_price = self.normalizer.round_price(original)

        def segment(start: date, end: date, price: Decimal, discounted: bool) -> PriceHistorySegment:
            return PriceHistorySegment(
                date_from=start,
                date_to=end,
                price=price,
                discounted=discounted,
                store_name=record.store_name,
                brand=record.brand,
            )

        if not overlapping:
            return [segment(interval_from, interval_to, regular_price, False)]

        segments: List[PriceHistorySegment] = []
        cursor = interval_from

        for discount in overlapping:
            # Clip to the interval and to what earlier discounts already covered
            discount_start = max(interval_from, discount.date_from, cursor)
            discount_end = min(interval_to, discount.date_to)
            if discount_start >= discount_end:
                continue

            if cursor < discount_start:
                segments.append(segment(cursor, discount_start, regular_price, False))

            discounted_price = self.normalizer.round_price(
                self.normalizer.apply_discount(original, discount.percentage)
            )
            segments.append(segment(discount_start, discount_end, discounted_price, True))
            cursor = discount_end

        if cursor < interval_to:
            segments.append(segment(cursor, interval_to, regular_price, False))

        return segments

"""Catalog backed by an in-memory snapshot of records."""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from pricecomparator.catalog.base import CatalogReader, same_text
from pricecomparator.schemas.catalog import DiscountRecord, ProductRecord


class InMemoryCatalog(CatalogReader):
    """Immutable catalog snapshot.

    Records are kept in the order given. When two records for the same
    product and store share a date_added, the one given later is treated
    as the newer one, matching append-only semantics.
    """

    thread_safe = True

    def __init__(
        self,
        products: Sequence[ProductRecord] = (),
        discounts: Sequence[DiscountRecord] = (),
    ):
        self._products = tuple(products)
        self._discounts = tuple(discounts)

    def _latest(self, candidates: List[ProductRecord]) -> Optional[ProductRecord]:
        if not candidates:
            return None
        # max() keeps the first maximum, so walk newest-appended first
        return max(reversed(candidates), key=lambda record: record.date_added)

    def latest_product_by_name(self, name: str, store: str) -> Optional[ProductRecord]:
        return self._latest([
            p for p in self._products
            if same_text(p.name, name) and same_text(p.store_name, store)
        ])

    def latest_product_by_id(self, product_id: str, store: str) -> Optional[ProductRecord]:
        return self._latest([
            p for p in self._products
            if p.product_id == product_id and same_text(p.store_name, store)
        ])

    def distinct_stores(self) -> List[str]:
        seen = {}
        for product in self._products:
            seen.setdefault(product.store_name.casefold(), product.store_name)
        return list(seen.values())

    def filtered_product_history(
        self,
        name: str,
        store: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> List[ProductRecord]:
        matches = [
            p for p in self._products
            if same_text(p.name, name)
            and (store is None or same_text(p.store_name, store))
            and (category is None or same_text(p.category, category))
            and (brand is None or same_text(p.brand, brand))
        ]
        # sorted() is stable, so same-day records keep their given order
        return sorted(matches, key=lambda record: record.date_added)

    def active_discounts(self, on: date) -> List[DiscountRecord]:
        return [d for d in self._discounts if d.is_active_on(on)]

    def discounts_by_name(self, name: str) -> List[DiscountRecord]:
        return [d for d in self._discounts if same_text(d.name, name)]

    def discounts_added_on(self, dates: Iterable[date]) -> List[DiscountRecord]:
        wanted = set(dates)
        return [d for d in self._discounts if d.date_added in wanted]

"""Catalog collaborator interface.

The engine never owns product or discount data. It reads a snapshot
through a CatalogReader, which a caller backs with whatever store it
has (an in-memory list, a database session, ...).

All name, store, category and brand matches are case-insensitive.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional

from pricecomparator.schemas.catalog import DiscountRecord, ProductRecord


class CatalogReader(ABC):
    """Read-only access to product and discount records."""

    # Whether several threads may call this reader at once
    thread_safe: bool = False

    @abstractmethod
    def latest_product_by_name(self, name: str, store: str) -> Optional[ProductRecord]:
        """Most recently added record with this name at this store.

        Returns:
            ProductRecord or None if the store never carried the product
        """

    @abstractmethod
    def latest_product_by_id(self, product_id: str, store: str) -> Optional[ProductRecord]:
        """Most recently added record with this business id at this store."""

    @abstractmethod
    def distinct_stores(self) -> List[str]:
        """Every store name known to the catalog, in a stable order."""

    @abstractmethod
    def filtered_product_history(
        self,
        name: str,
        store: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> List[ProductRecord]:
        """All records for a product name, oldest first.

        Args:
            name: Product name
            store: Optional store filter
            category: Optional category filter
            brand: Optional brand filter

        Returns:
            Records ordered by date_added ascending
        """

    @abstractmethod
    def active_discounts(self, on: date) -> List[DiscountRecord]:
        """Discounts whose inclusive [date_from, date_to] window contains ``on``."""

    @abstractmethod
    def discounts_by_name(self, name: str) -> List[DiscountRecord]:
        """Every discount ever recorded for a product name."""

    @abstractmethod
    def discounts_added_on(self, dates: Iterable[date]) -> List[DiscountRecord]:
        """Discounts whose date_added is one of ``dates``."""


def same_text(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive equality that treats None as its own value."""
    if left is None or right is None:
        return left is right
    return left.casefold() == right.casefold()

"""Catalog backed by a SQLAlchemy session.

Read-only: every method issues a single SELECT against the
product_records / discount_records tables and converts rows into the
frozen record schemas.
"""

from datetime import date
from typing import Iterable, List, Optional

import structlog
from pydantic import ValidationError
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from pricecomparator.catalog.base import CatalogReader
from pricecomparator.core.exceptions import DataInconsistencyError
from pricecomparator.models.discount import Discount
from pricecomparator.models.product import Product
from pricecomparator.schemas.catalog import DiscountRecord, ProductRecord

logger = structlog.get_logger(__name__)


def _ieq(column, value: str):
    return func.lower(column) == value.lower()


class SqlCatalog(CatalogReader):
    """Catalog reader over an open SQLAlchemy session."""

    def __init__(self, db: Session):
        """Initialize the catalog.

        Args:
            db: SQLAlchemy session, owned by the caller
        """
        self.db = db
        self.logger = logger.bind(service="sql_catalog")

    # ------------------------------------------------------------------
    # Row conversion
    # ------------------------------------------------------------------

    def _to_product(self, row: Product) -> ProductRecord:
        try:
            return ProductRecord.model_validate(row)
        except ValidationError as e:
            self.logger.error("malformed_product_row", row_id=row.id, error=str(e))
            raise DataInconsistencyError(row.product_id, row.store_name, "malformed product row") from e

    def _to_discount(self, row: Discount) -> DiscountRecord:
        try:
            return DiscountRecord.model_validate(row)
        except ValidationError as e:
            self.logger.error("malformed_discount_row", row_id=row.id, error=str(e))
            raise DataInconsistencyError(row.product_id, row.store_name, "malformed discount row") from e

    def _first_product(self, *conditions) -> Optional[ProductRecord]:
        result = self.db.execute(
            select(Product)
            .where(and_(*conditions))
            .order_by(Product.date_added.desc(), Product.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return self._to_product(row) if row is not None else None

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def latest_product_by_name(self, name: str, store: str) -> Optional[ProductRecord]:
        return self._first_product(_ieq(Product.name, name), _ieq(Product.store_name, store))

    def latest_product_by_id(self, product_id: str, store: str) -> Optional[ProductRecord]:
        return self._first_product(Product.product_id == product_id, _ieq(Product.store_name, store))

    def distinct_stores(self) -> List[str]:
        # Stores come back in the order they first appeared in the catalog
        result = self.db.execute(
            select(Product.store_name, func.min(Product.id).label("first_id"))
            .group_by(Product.store_name)
            .order_by("first_id")
        )
        seen = {}
        for store_name, _ in result.all():
            seen.setdefault(store_name.lower(), store_name)
        return list(seen.values())

    def filtered_product_history(
        self,
        name: str,
        store: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> List[ProductRecord]:
        query = select(Product).where(_ieq(Product.name, name))

        if store is not None:
            query = query.where(_ieq(Product.store_name, store))
        if category is not None:
            query = query.where(_ieq(Product.category, category))
        if brand is not None:
            query = query.where(_ieq(Product.brand, brand))

        query = query.order_by(Product.date_added.asc(), Product.id.asc())
        result = self.db.execute(query)
        rows = list(result.scalars().all())

        self.logger.debug("product_history_fetched", name=name, count=len(rows))
        return [self._to_product(row) for row in rows]

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    def _discounts(self, *conditions) -> List[DiscountRecord]:
        result = self.db.execute(
            select(Discount).where(and_(*conditions)).order_by(Discount.id.asc())
        )
        return [self._to_discount(row) for row in result.scalars().all()]

    def active_discounts(self, on: date) -> List[DiscountRecord]:
        return self._discounts(Discount.date_from <= on, Discount.date_to >= on)

    def discounts_by_name(self, name: str) -> List[DiscountRecord]:
        return self._discounts(_ieq(Discount.name, name))

    def discounts_added_on(self, dates: Iterable[date]) -> List[DiscountRecord]:
        wanted = list(dates)
        if not wanted:
            return []
        return self._discounts(Discount.date_added.in_(wanted))

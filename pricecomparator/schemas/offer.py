"""Offer and basket result schemas."""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pricecomparator.schemas.catalog import Currency, PackageUnit


class Offer(BaseModel):
    """Cheapest store-specific price for a product, after any active discount.

    All prices are in RON and rounded to two decimals.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    brand: Optional[str] = None
    product_id: str
    category: Optional[str] = None
    store_name: str
    currency: Currency = Currency.RON
    original_price: Decimal
    discount_percentage: int = 0
    discounted_price: Decimal
    price_per_unit: Decimal
    unit: PackageUnit

    @property
    def price_per_unit_label(self) -> str:
        """Human readable unit price, e.g. ``"12.5 RON per kg"``."""
        return f"{self.price_per_unit} RON per {self.unit.value}"

    @property
    def is_discounted(self) -> bool:
        return self.discount_percentage > 0


class BasketReport(BaseModel):
    """Outcome of evaluating a basket item by item.

    offers keeps input order. Names carried by no store land in
    not_found; names whose evaluation hit inconsistent catalog data land
    in errors with the failure message.
    """

    offers: List[Offer] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return sum((offer.discounted_price for offer in self.offers), Decimal("0"))

    def grouped_by_store(self) -> Dict[str, List[Offer]]:
        """Partition offers by chosen store, keeping product order per group."""
        groups: Dict[str, List[Offer]] = {}
        for offer in self.offers:
            groups.setdefault(offer.store_name, []).append(offer)
        return groups

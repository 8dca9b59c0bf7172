"""Pydantic schemas for the price comparator.

All value types are defined here for easy import.
"""

from pricecomparator.schemas.catalog import Currency, DiscountRecord, PackageUnit, ProductRecord
from pricecomparator.schemas.offer import BasketReport, Offer
from pricecomparator.schemas.history import HistoryFilter, PriceHistorySegment
from pricecomparator.schemas.alert import PriceAlert

__all__ = [
    # Catalog
    "Currency",
    "PackageUnit",
    "ProductRecord",
    "DiscountRecord",
    # Offer
    "Offer",
    "BasketReport",
    # History
    "HistoryFilter",
    "PriceHistorySegment",
    # Alert
    "PriceAlert",
]

"""SQLAlchemy models read by the database catalog adapter."""

from pricecomparator.models.base import Base, IntegerPrimaryKeyMixin
from pricecomparator.models.product import Product
from pricecomparator.models.discount import Discount

__all__ = [
    "Base",
    "IntegerPrimaryKeyMixin",
    "Product",
    "Discount",
]

"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from pricecomparator.schemas import DiscountRecord, ProductRecord

TODAY = date(2025, 5, 20)


def day(offset: int) -> date:
    """Date ``offset`` days after 2025-05-01."""
    return date(2025, 5, 1) + timedelta(days=offset)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock():
    """Clock pinned to TODAY."""
    return lambda: TODAY


@pytest.fixture
def make_product():
    """Factory for ProductRecord with sensible defaults."""

    def _make(**overrides) -> ProductRecord:
        data = {
            "product_id": "P001",
            "name": "lapte zuzu",
            "category": "lactate",
            "brand": "Zuzu",
            "package_quantity": Decimal("1"),
            "package_unit": "l",
            "price": Decimal("10.00"),
            "currency": "RON",
            "store_name": "Lidl",
            "date_added": day(0),
        }
        data.update(overrides)
        return ProductRecord(**data)

    return _make


@pytest.fixture
def make_discount():
    """Factory for DiscountRecord with sensible defaults."""

    def _make(**overrides) -> DiscountRecord:
        data = {
            "product_id": "P001",
            "name": "lapte zuzu",
            "category": "lactate",
            "brand": "Zuzu",
            "package_quantity": Decimal("1"),
            "package_unit": "l",
            "date_from": TODAY - timedelta(days=2),
            "date_to": TODAY + timedelta(days=2),
            "percentage": 10,
            "store_name": "Lidl",
            "date_added": TODAY - timedelta(days=2),
        }
        data.update(overrides)
        return DiscountRecord(**data)

    return _make

"""Catalog record schemas.

ProductRecord and DiscountRecord are append-only snapshots owned by the
catalog. The engine only reads them, so both models are frozen.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Currency(str, Enum):
    """Currencies a catalog price can be expressed in."""

    RON = "RON"
    EUR = "EUR"
    USD = "USD"
    UNKNOWN = "UNKNOWN"  # Fallback for anything else

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().upper():
                    return member
        return cls.UNKNOWN


class PackageUnit(str, Enum):
    """Units a product package can be measured in."""

    buc = "buc"
    l = "l"  # noqa: E741
    g = "g"
    kg = "kg"
    role = "role"
    ml = "ml"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value):
        # Case-insensitive lookup only; unrecognised units are rejected
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class ProductRecord(BaseModel):
    """One store's price snapshot of a product on one date."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    product_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: Optional[str] = None
    brand: Optional[str] = None
    package_quantity: Decimal = Field(gt=0)
    package_unit: PackageUnit
    price: Decimal = Field(ge=0)
    currency: Currency = Currency.RON
    store_name: str = Field(min_length=1)
    date_added: date

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, value):
        return Currency.RON if value is None else Currency(value)

    @field_validator("package_unit", mode="before")
    @classmethod
    def coerce_unit(cls, value):
        return PackageUnit(value)


class DiscountRecord(BaseModel):
    """A percentage markdown valid over an inclusive date range."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    product_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: Optional[str] = None
    brand: Optional[str] = None
    package_quantity: Optional[Decimal] = Field(default=None, gt=0)
    package_unit: Optional[PackageUnit] = None
    date_from: date
    date_to: date
    percentage: int = Field(ge=0, le=100)
    store_name: str = Field(min_length=1)
    date_added: date

    @field_validator("package_unit", mode="before")
    @classmethod
    def coerce_unit(cls, value):
        return None if value is None else PackageUnit(value)

    @model_validator(mode="after")
    def check_window(self) -> "DiscountRecord":
        if self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    def is_active_on(self, day: date) -> bool:
        """True when ``day`` falls inside the inclusive validity window."""
        return self.date_from <= day <= self.date_to

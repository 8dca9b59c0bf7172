"""Price timeline schemas."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class HistoryFilter(BaseModel):
    """Optional narrowing of a price history query.

    Every field is matched case-insensitively. None means "any".
    """

    model_config = ConfigDict(frozen=True)

    store: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None

    @field_validator("store", "category", "brand")
    @classmethod
    def strip_and_reject_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("filter value must not be blank")
        return value


class PriceHistorySegment(BaseModel):
    """A half-open [date_from, date_to) interval with one fixed RON price."""

    model_config = ConfigDict(frozen=True)

    date_from: date
    date_to: date
    price: Decimal
    discounted: bool
    store_name: str
    brand: Optional[str] = None

"""Price alert schemas."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PriceAlert(BaseModel):
    """A user's request to be told when a product drops to a target price."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    product_name: str = Field(min_length=1)
    target_price: Decimal = Field(ge=0)
    user_email: str = Field(min_length=3)
    notified: bool = False
    created_at: Optional[date] = None

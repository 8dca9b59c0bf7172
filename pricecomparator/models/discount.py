"""Discount records."""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pricecomparator.models.base import Base, IntegerPrimaryKeyMixin


class Discount(IntegerPrimaryKeyMixin, Base):
    """A percentage markdown for a product at one store.

    Valid on every day in the inclusive [date_from, date_to] window.
    """

    __tablename__ = "discount_records"

    product_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100))
    brand: Mapped[Optional[str]] = mapped_column(String(100))
    package_quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3))
    package_unit: Mapped[Optional[str]] = mapped_column(String(10))

    # Validity window
    date_from: Mapped[date] = mapped_column(Date, nullable=False)
    date_to: Mapped[date] = mapped_column(Date, nullable=False)

    percentage: Mapped[int] = mapped_column(Integer, nullable=False, comment="0-100")
    store_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_added: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("idx_discount_records_window", "date_from", "date_to"),
        Index("idx_discount_records_date_added", "date_added"),
    )

    def __repr__(self) -> str:
        return f"<Discount(product_id={self.product_id}, store={self.store_name}, percentage={self.percentage}, {self.date_from}..{self.date_to})>"

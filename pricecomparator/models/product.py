"""Product price snapshots."""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pricecomparator.models.base import Base, IntegerPrimaryKeyMixin


class Product(IntegerPrimaryKeyMixin, Base):
    """One store's price for a product on the day it was imported.

    Rows are append-only: a new price creates a new row, and the row
    with the greatest date_added is the current one.
    """

    __tablename__ = "product_records"

    product_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True, comment="Business product id")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100))
    brand: Mapped[Optional[str]] = mapped_column(String(100))

    # Package
    package_quantity: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    package_unit: Mapped[str] = mapped_column(String(10), nullable=False, comment="buc, l, g, kg, role, ml")

    # Price in the store's native currency
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="RON")

    store_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_added: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("idx_product_records_name_store_date", "name", "store_name", "date_added"),
        Index("idx_product_records_pid_store_date", "product_id", "store_name", "date_added"),
    )

    def __repr__(self) -> str:
        return f"<Product(product_id={self.product_id}, store={self.store_name}, price={self.price}, date_added={self.date_added})>"

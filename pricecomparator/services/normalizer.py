"""Currency and unit normalization for fair price comparison.

Every price the engine compares is first converted into RON, and every
package quantity into its base unit (kg, l, or a plain count), so a
500 g pack in EUR and a 1 kg pack in RON land on the same scale.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Optional, Union

from pricecomparator.config import Settings
from pricecomparator.core.exceptions import InvalidInputError
from pricecomparator.schemas.catalog import Currency, PackageUnit

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
THOUSAND = Decimal("1000")

# Fixed exchange rates into RON
DEFAULT_RATES: Dict[Currency, Decimal] = {
    Currency.RON: Decimal("1"),
    Currency.EUR: Decimal("5.0"),
    Currency.USD: Decimal("4.6"),
}

# Sub-units that scale down to a base unit by 1000
_BASE_UNITS: Dict[PackageUnit, PackageUnit] = {
    PackageUnit.g: PackageUnit.kg,
    PackageUnit.ml: PackageUnit.l,
}


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_unit(value: Union[PackageUnit, str]) -> PackageUnit:
    """Parse a package unit, case-insensitively."""
    try:
        return PackageUnit(value)
    except ValueError as e:
        raise InvalidInputError("unit", f"unrecognised package unit {value!r}") from e


def rates_from_settings(config: Settings) -> Dict[Currency, Decimal]:
    """Build the RON exchange table from configured rates."""
    return {
        Currency.RON: Decimal("1"),
        Currency.EUR: config.EUR_TO_RON,
        Currency.USD: config.USD_TO_RON,
    }


class PriceNormalizer:
    """Price and quantity conversion into canonical RON and base units.

    Currencies without a configured rate (including UNKNOWN) pass
    through unchanged rather than failing.
    """

    def __init__(self, rates: Optional[Mapping[Currency, Decimal]] = None):
        self.rates: Mapping[Currency, Decimal] = dict(rates or DEFAULT_RATES)

    def to_ron(self, price: Number, currency: Union[Currency, str]) -> Decimal:
        """Convert a price into RON.

        Args:
            price: Amount in the given currency
            currency: Currency code or enum member

        Returns:
            Amount in RON, unrounded
        """
        rate = self.rates.get(Currency(currency))
        amount = to_decimal(price)
        return amount if rate is None else amount * rate

    @staticmethod
    def normalize_unit(unit: Union[PackageUnit, str]) -> PackageUnit:
        """Map g to kg and ml to l. Other units are returned unchanged.

        Raises:
            InvalidInputError: If the unit is not a known PackageUnit
        """
        unit = to_unit(unit)
        return _BASE_UNITS.get(unit, unit)

    @staticmethod
    def normalize_quantity(unit: Union[PackageUnit, str], quantity: Number) -> Decimal:
        """Express a quantity in the base unit of ``unit``."""
        quantity = to_decimal(quantity)
        if to_unit(unit) in _BASE_UNITS:
            return quantity / THOUSAND
        return quantity

    @staticmethod
    def round_price(value: Number) -> Decimal:
        """Round to two decimals, half away from zero."""
        return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    @staticmethod
    def apply_discount(price: Number, percentage: int) -> Decimal:
        """Price after a percentage markdown, unrounded."""
        return to_decimal(price) * (1 - Decimal(percentage) / 100)


_default = PriceNormalizer()

convert_to_ron = _default.to_ron
normalize_unit = PriceNormalizer.normalize_unit
normalize_quantity = PriceNormalizer.normalize_quantity
round_price = PriceNormalizer.round_price


def clean_product_name(name: Optional[str], field: str = "product_name") -> str:
    """Strip a product name, rejecting missing or blank values.

    Raises:
        InvalidInputError: If the name is None or blank
    """
    if name is None or not str(name).strip():
        raise InvalidInputError(field, "product name must not be blank")
    return str(name).strip()

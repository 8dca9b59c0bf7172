"""Price comparison engine: best offers, basket optimization and price timelines."""

from pricecomparator.engine import PriceEngine

__version__ = "0.1.0"

__all__ = ["PriceEngine", "__version__"]

"""
Calculation caching infrastructure.
"""

from .calculation_cache import CalculationCache, content_key

__all__ = ["CalculationCache", "content_key"]

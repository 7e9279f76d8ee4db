"""Mathematical primitives for the StableSwap engine.

This package provides:
- Fp: 18-decimal fixed-point ratios
- mul_div / checked_pow: checked integer helpers with explicit rounding
"""

from stableswap.math.fixed_point import ONE_18, Fp, Rounding, checked_pow, mul_div, within_tolerance

__all__ = ["Fp", "ONE_18", "Rounding", "checked_pow", "mul_div", "within_tolerance"]

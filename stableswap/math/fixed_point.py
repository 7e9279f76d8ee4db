"""Fixed-point helpers for the invariant engine.

Quantities are unsigned integers. Balances are normalized to a common
precision before they reach the solvers, and ratios (virtual price, fee
fractions expressed as Fp) use an 18-decimal scale.

All arithmetic goes through SafeInt, so overflow and division by zero
surface as typed errors instead of wrong answers.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from stableswap.safe_int import S, SafeInt

__all__ = [
    # Classes
    "Fp",
    "Rounding",
    # Functions
    "checked_pow",
    "mul_div",
    "within_tolerance",
    # Constants
    "ONE_18",
]

ONE_18 = 10**18


class Rounding(Enum):
    """Direction to round a truncated quotient."""

    DOWN = "down"
    UP = "up"


def mul_div(a: int | SafeInt, b: int | SafeInt, c: int | SafeInt, rounding: Rounding = Rounding.DOWN) -> int:
    """Compute a * b / c with the requested rounding.

    Raises:
        ArithmeticOverflow: If a * b exceeds UINT256_MAX
        DivisionByZero: If c is zero
    """
    product = S(a) * S(b)
    if rounding is Rounding.UP:
        return product.ceiling_div(c).value
    return (product // c).value


def checked_pow(base: int | SafeInt, exponent: int) -> int:
    """Integer power by repeated squaring, checked at every step.

    Raises:
        ValueError: If exponent is negative
        ArithmeticOverflow: If any intermediate exceeds UINT256_MAX
    """
    if exponent < 0:
        raise ValueError(f"checked_pow requires a non-negative exponent, got {exponent}")
    result = S(1)
    square = S(base)
    while exponent:
        if exponent & 1:
            result = result * square
        exponent >>= 1
        if exponent:
            square = square * square
    return result.value


def within_tolerance(a: int | SafeInt, b: int | SafeInt, tolerance: int = 1) -> bool:
    """Newton convergence test: |a - b| <= tolerance."""
    return S(a).abs_diff(b) <= tolerance


class Fp:
    """18-decimal fixed-point ratio stored as int.

    Only built from exact ratios and compared; the engine does no
    arithmetic in Fp.

    Example: 1.5 is stored as 1_500_000_000_000_000_000
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create Fp from raw scaled value."""
        self.value = S(value).value

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int, rounding: Rounding = Rounding.DOWN) -> Fp:
        """Create numerator / denominator as a fixed-point value."""
        return cls(mul_div(numerator, cls.ONE, denominator, rounding))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Fp({self.value})"
